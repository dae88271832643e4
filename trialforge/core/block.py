"""Block-level trial generation.

Composes the sequence generators, the distribution sampler, the direction
assigner and the parameter builder into the ordered trial list of one
block. Task and congruency sequences are drawn once for the whole block;
ITI, SOA and directions are drawn per trial.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional

import numpy as np

from trialforge.config.schema import BlockConfig
from trialforge.constants import UNIVALENT, complement_task
from trialforge.core.directions import assign_directions
from trialforge.core.params import SEParams, TrialSpec, build_trial_params
from trialforge.core.sampling import make_rng, sample_from_distribution
from trialforge.core.sequences import (
    classify_transitions,
    generate_congruency_sequence,
    generate_task_sequence,
)


@dataclass(frozen=True)
class TrialMeta:
    """Analysis record of one trial.

    Attributes:
        trial_number: 1-based position in the block.
        block_id: Identifier of the block.
        block_type: Block label (``pure``, ``mixed``, ``prp``).
        paradigm: ``single-task`` or ``dual-task``.
        task: Channel-1 task (T1 in dual-task blocks).
        task2: Channel-2 task, ``None`` for single-task blocks.
        transition_type: ``First``, ``Repeat`` or ``Switch``.
        congruency: Congruency label of this trial.
        previous_congruency: Congruency of the previous trial, ``None`` first.
        iti: Sampled inter-trial interval (ms).
        soa: Sampled SOA (ms), ``None`` for single-task blocks.
        primary_direction: Channel-1 task direction.
        distractor_direction: Channel-1 distractor direction, ``None`` when
            univalent.
        ch2_direction: Channel-2 task direction, ``None`` for single-task.
    """
    trial_number: int
    block_id: str
    block_type: str
    paradigm: str
    task: str
    task2: Optional[str]
    transition_type: str
    congruency: str
    previous_congruency: Optional[str]
    iti: float
    soa: Optional[float]
    primary_direction: int
    distractor_direction: Optional[int]
    ch2_direction: Optional[int]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Trial:
    """Engine parameters and analysis metadata of one trial."""
    params: SEParams
    meta: TrialMeta

    def to_dict(self) -> Dict[str, Any]:
        return {"params": self.params.to_dict(), "meta": self.meta.to_dict()}


def generate_block_trials(
    config: BlockConfig,
    num_trials: int,
    rng: Optional[np.random.Generator] = None,
) -> List[Trial]:
    """Generate the ordered trials of one block.

    Args:
        config: Block declaration.
        num_trials: Number of trials to generate.
        rng: Source of randomness; a fresh unseeded generator if ``None``.

    Returns:
        ``num_trials`` trials in presentation order.

    Raises:
        UnknownSequenceType: If ``config.sequence_type`` is not registered.
        UnknownDistributionType: If ``config.iti``/``config.soa`` has an
            unregistered type.
        UnknownTaskError: If a task label is invalid.
    """
    if rng is None:
        rng = make_rng()
    dual = config.is_dual_task

    # Dual-task blocks always open with task1 as T1; the sequence then
    # decides which task is T1 on each trial.
    start_task = config.task1 if dual else config.start_task
    task_sequence = generate_task_sequence(
        num_trials, config.sequence_type, config.switch_rate, start_task, rng
    )
    transitions = classify_transitions(task_sequence)
    congruencies = generate_congruency_sequence(
        num_trials, config.congruency.conditions, config.congruency.proportions, rng
    )

    trials = []
    for i in range(num_trials):
        task1 = task_sequence[i]
        task2 = complement_task(task1) if dual else None
        congruency = congruencies[i]

        iti = sample_from_distribution(config.iti, rng)
        soa = sample_from_distribution(config.soa, rng) if dual else None
        directions = assign_directions(task1, congruency, config.paradigm, config.rso, rng)

        spec = TrialSpec(
            task1=task1,
            task2=task2,
            csi=config.csi,
            dur_ch1=config.stimulus_duration,
            dur_ch2=config.stimulus_duration if dual else 0,
            soa=soa if dual else 0,
            response_window=config.response_window,
            coherence=config.coherence,
            directions=directions,
        )
        meta = TrialMeta(
            trial_number=i + 1,
            block_id=config.block_id,
            block_type=config.block_type,
            paradigm=config.paradigm,
            task=task1,
            task2=task2,
            transition_type=transitions[i],
            congruency=congruency,
            previous_congruency=congruencies[i - 1] if i > 0 else None,
            iti=iti,
            soa=soa,
            primary_direction=directions.ch1_task,
            distractor_direction=None if congruency == UNIVALENT else directions.ch1_distractor,
            ch2_direction=directions.ch2_task if dual else None,
        )
        trials.append(Trial(params=build_trial_params(spec), meta=meta))
    return trials
