"""Block-level task and congruency sequences.

Sequences are generated once per block, not trial by trial, so that the
transition structure and the exact congruency proportions hold over the
whole block.

Task-sequence schemes are registered in
:data:`~trialforge.registry.SEQUENCE_REGISTRY` under the names used in
block configurations (``Random``, ``AABB``).
"""

from __future__ import annotations

import math
from typing import List, Optional, Sequence

import numpy as np

from trialforge.constants import (
    FIRST,
    REPEAT,
    SWITCH,
    TASK_MOVEMENT,
    TASK_ORIENTATION,
    check_task,
    complement_task,
)
from trialforge.errors import ConfigurationError
from trialforge.registry import SEQUENCE_REGISTRY


@SEQUENCE_REGISTRY("Random")
def _random_sequence(
    first: str, num_trials: int, switch_rate: float, rng: np.random.Generator
) -> List[str]:
    # First-order Markov chain; switch_rate=50 gives independent fair draws.
    sequence = [first]
    p_switch = switch_rate / 100
    for _ in range(1, num_trials):
        prev = sequence[-1]
        sequence.append(complement_task(prev) if rng.random() < p_switch else prev)
    return sequence


@SEQUENCE_REGISTRY("AABB")
def _aabb_sequence(
    first: str, num_trials: int, switch_rate: float, rng: np.random.Generator
) -> List[str]:
    sequence = [first]
    for i in range(1, num_trials):
        prev = sequence[-1]
        sequence.append(complement_task(prev) if i % 2 == 0 else prev)
    return sequence


def generate_task_sequence(
    num_trials: int,
    sequence_type: str,
    switch_rate: float,
    start_task: Optional[str],
    rng: np.random.Generator,
) -> List[str]:
    """Generate the per-trial task identities of a block.

    For single-task blocks the sequence is the task of each trial; for
    dual-task blocks it is the T1 task (T2 is the complement).

    Args:
        num_trials: Sequence length.
        sequence_type: ``Random`` (Markov switching) or ``AABB`` (runs of two).
        switch_rate: Percent probability of switching, used by ``Random``.
        start_task: First task, or ``None`` for a fair coin flip.
        rng: Source of randomness.

    Returns:
        List of ``'mov'``/``'or'`` labels of length ``num_trials``.

    Raises:
        UnknownSequenceType: If ``sequence_type`` is not registered.
    """
    scheme = SEQUENCE_REGISTRY.get(sequence_type)
    if num_trials <= 0:
        return []
    if start_task is None:
        first = TASK_MOVEMENT if rng.random() < 0.5 else TASK_ORIENTATION
    else:
        first = check_task(start_task)
    return scheme(first, num_trials, switch_rate, rng)


def classify_transitions(task_sequence: Sequence[str]) -> List[str]:
    """Label each trial ``First``, ``Repeat`` or ``Switch``."""
    labels = []
    for i, task in enumerate(task_sequence):
        if i == 0:
            labels.append(FIRST)
        else:
            labels.append(REPEAT if task == task_sequence[i - 1] else SWITCH)
    return labels


def generate_congruency_sequence(
    num_trials: int,
    conditions: Sequence[str],
    proportions: Sequence[float],
    rng: np.random.Generator,
) -> List[str]:
    """Shuffled congruency labels with exact per-block counts.

    Every condition but the last receives ``round(num_trials * proportion)``
    trials (halves round up); the last condition takes the remainder so the
    result always has exactly ``num_trials`` labels. If rounding would
    overshoot, later conditions are capped at what is left.

    Raises:
        ConfigurationError: If ``conditions`` is empty or its length
            differs from ``proportions``.
    """
    if not conditions:
        raise ConfigurationError("Congruency requires at least one condition")
    if len(conditions) != len(proportions):
        raise ConfigurationError(
            f"Congruency has {len(conditions)} conditions but "
            f"{len(proportions)} proportions"
        )
    sequence: List[str] = []
    assigned = 0
    last = len(conditions) - 1
    for i, condition in enumerate(conditions):
        if i == last:
            count = num_trials - assigned
        else:
            count = int(math.floor(num_trials * proportions[i] + 0.5))
            count = min(count, num_trials - assigned)
        sequence.extend([condition] * count)
        assigned += count

    # Fisher-Yates
    for i in range(len(sequence) - 1, 0, -1):
        j = int(rng.integers(i + 1))
        sequence[i], sequence[j] = sequence[j], sequence[i]
    return sequence
