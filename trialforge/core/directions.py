"""Stimulus direction assignment per channel.

Directions are in degrees: 0 and 180 lie on the response axis, 90 and 270
on the orthogonal axis used only by neutral distractors.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict

import numpy as np

from trialforge.constants import CONGRUENT, DUAL_TASK, INCONGRUENT, NEUTRAL

HORIZONTAL = (0, 180)
ORTHOGONAL = (90, 270)


@dataclass(frozen=True)
class Directions:
    """Task and distractor directions for both channels."""
    ch1_task: int
    ch1_distractor: int
    ch2_task: int
    ch2_distractor: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _coin(rng: np.random.Generator, options) -> int:
    return options[0] if rng.random() < 0.5 else options[1]


def assign_directions(
    task: str,
    congruency: str,
    paradigm: str,
    rso: str,
    rng: np.random.Generator,
) -> Directions:
    """Pick the four direction values of one trial.

    Dual-task trials draw channel 1 and channel 2 independently from
    {0, 180} and have no within-channel distractor. ``rso`` does not change
    the geometry; response-set overlap is realized by the key maps.

    Single-task trials draw the primary direction from {0, 180}; the
    distractor follows ``congruency``: equal (congruent), opposite
    (incongruent), 90/270 (neutral), or 0 for univalent trials whose
    distractor pathway is silenced by coherence.

    Args:
        task: Primary task of the trial (kept for routing symmetry).
        congruency: Congruency label of the trial.
        paradigm: ``single-task`` or ``dual-task``.
        rso: Response-set overlap mode.
        rng: Source of randomness.
    """
    if paradigm == DUAL_TASK:
        ch1 = _coin(rng, HORIZONTAL)
        ch2 = _coin(rng, HORIZONTAL)
        return Directions(ch1_task=ch1, ch1_distractor=0, ch2_task=ch2, ch2_distractor=0)

    primary = _coin(rng, HORIZONTAL)
    if congruency == CONGRUENT:
        distractor = primary
    elif congruency == INCONGRUENT:
        distractor = 180 if primary == 0 else 0
    elif congruency == NEUTRAL:
        distractor = _coin(rng, ORTHOGONAL)
    else:
        distractor = 0
    return Directions(ch1_task=primary, ch1_distractor=distractor, ch2_task=0, ch2_distractor=0)
