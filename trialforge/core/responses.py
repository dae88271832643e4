"""Response key maps and key-press scoring.

Response-set overlap is realized here, not in the stimulus geometry: with
``identical`` sets both tasks share the a/d keys, with ``disjoint`` sets the
movement task uses the left hand and the orientation task the right hand.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Mapping, Optional, Sequence

from trialforge.constants import DUAL_TASK, RSO_DISJOINT, RSO_IDENTICAL, RSO_MODES
from trialforge.errors import ConfigurationError

STIMULUS_SIZE = 0.75


def response_key_maps(rso: str) -> Dict[str, Any]:
    """Direction → key maps for both tasks under a response-set-overlap mode.

    Raises:
        ConfigurationError: If ``rso`` is not a known mode.
    """
    if rso == RSO_DISJOINT:
        return {
            "movementKeyMap": {180: "a", 0: "d", 90: "w", 270: "s"},
            "orientationKeyMap": {180: "j", 0: "l", 90: "i", 270: "k"},
            "size": STIMULUS_SIZE,
        }
    if rso == RSO_IDENTICAL:
        return {
            "movementKeyMap": {180: "a", 0: "d"},
            "orientationKeyMap": {180: "a", 0: "d"},
            "size": STIMULUS_SIZE,
        }
    raise ConfigurationError(f"Unknown rso '{rso}'. Valid: {list(RSO_MODES)}")


def score_key_presses(key_presses: Sequence[Mapping[str, Any]], trial) -> Dict[str, Any]:
    """Derive reaction times and accuracy from the engine's key presses.

    The engine reports each press as ``{time, isCorrect, ...}`` with ``time``
    relative to trial onset and does not say which go signal a press
    answered. The first correct press is taken as the channel-1 response and
    the second correct press as the channel-2 response (dual-task only).

    Accuracy labels: ``correct``, ``corrected`` (correct after an error),
    ``error`` and ``miss``. ``accuracy2`` is ``None`` on single-task trials.

    Args:
        key_presses: Key-press records in chronological order.
        trial: The :class:`~trialforge.core.block.Trial` that was run.

    Returns:
        Dict with ``rt1_raw``, ``rt1``, ``accuracy1``, ``rt2_raw``, ``rt2``,
        ``accuracy2`` and ``raw_key_presses`` (the presses as a JSON
        string, kept for the trial log); RTs are relative to the go-signal
        onsets.
    """
    dual = trial.meta.paradigm == DUAL_TASK
    rt1_raw: Optional[float] = None
    rt2_raw: Optional[float] = None
    accuracy1 = "miss"
    accuracy2 = "miss" if dual else None
    had_error1 = False

    for press in key_presses:
        if press.get("isCorrect"):
            if rt1_raw is None:
                rt1_raw = press["time"]
                accuracy1 = "corrected" if had_error1 else "correct"
            elif dual and rt2_raw is None:
                rt2_raw = press["time"]
                accuracy2 = "correct"
        elif rt1_raw is None:
            had_error1 = True
            accuracy1 = "error"
        elif dual and rt2_raw is None:
            accuracy2 = "error"

    rt1 = rt1_raw - trial.params.start_go_1 if rt1_raw is not None else None
    rt2 = rt2_raw - trial.params.start_go_2 if rt2_raw is not None else None
    return {
        "rt1_raw": rt1_raw,
        "rt1": rt1,
        "accuracy1": accuracy1,
        "rt2_raw": rt2_raw,
        "rt2": rt2,
        "accuracy2": accuracy2,
        "raw_key_presses": json.dumps([dict(p) for p in key_presses]),
    }
