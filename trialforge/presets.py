"""Built-in session presets.

``hirsch`` replicates the three block types of the Hirsch et al. (2018)
design: pure single-task blocks for each task, a mixed task-switching block
at 50 % switch rate, and a PRP block whose T1/T2 order switches from trial to
trial. The PRP SOA is drawn from {50, 100, 200, 400, 600, 1000} ms instead
of only {100, 600}. Stimuli are univalent throughout and the response sets
are disjoint (movement on a/d, orientation on j/l).
"""

from __future__ import annotations

from dataclasses import replace
from typing import Callable, Dict, List

from trialforge.config.schema import (
    BlockConfig,
    CoherenceSpec,
    CongruencySpec,
    DistributionSpec,
    SessionBlock,
    SessionConfig,
)

HIRSCH_ITI = DistributionSpec(type="uniform", value=500, params=(400, 600))
HIRSCH_SOA_CHOICES = (50, 100, 200, 400, 600, 1000)


def hirsch_blocks() -> Dict[str, BlockConfig]:
    """Block declarations of the Hirsch replication, keyed by block id."""
    pure_mov = BlockConfig(
        block_id="hirsch_pure_mov",
        block_type="pure",
        paradigm="single-task",
        task1="mov",
        task2=None,
        sequence_type="Random",
        switch_rate=0,
        start_task="mov",
        csi=200,
        stimulus_duration=2500,
        response_window=2500,
        coherence=CoherenceSpec(ch1_task=0.8, ch1_distractor=0, ch2_task=0, ch2_distractor=0),
        congruency=CongruencySpec(conditions=("univalent",), proportions=(1.0,)),
        iti=HIRSCH_ITI,
        soa=DistributionSpec.fixed(0),
        rso="disjoint",
    )
    pure_or = replace(pure_mov, block_id="hirsch_pure_or", task1="or", start_task="or")
    mixed = replace(
        pure_mov,
        block_id="hirsch_mixed",
        block_type="mixed",
        switch_rate=50,
        start_task=None,
    )
    prp = replace(
        pure_mov,
        block_id="hirsch_prp",
        block_type="prp",
        paradigm="dual-task",
        task2="or",
        switch_rate=50,
        start_task=None,
        coherence=CoherenceSpec(ch1_task=0.8, ch1_distractor=0, ch2_task=0.6, ch2_distractor=0),
        soa=DistributionSpec(type="choice", value=100, params=HIRSCH_SOA_CHOICES),
    )
    return {b.block_id: b for b in (pure_mov, pure_or, mixed, prp)}


def hirsch_session(seed=None) -> SessionConfig:
    """Pure blocks, then the mixed block, then the PRP block."""
    blocks = hirsch_blocks()
    entries = [
        SessionBlock(
            block=blocks["hirsch_pure_mov"],
            num_trials=40,
            instructions=(
                "Pure block: MOVEMENT task only.\n\n"
                "Left hand: A = leftward, D = rightward.\n\n"
                "Press any key to begin."
            ),
        ),
        SessionBlock(
            block=blocks["hirsch_pure_or"],
            num_trials=40,
            instructions=(
                "Pure block: ORIENTATION task only.\n\n"
                "Right hand: J = leftward, L = rightward.\n\n"
                "Press any key to begin."
            ),
        ),
        SessionBlock(
            block=blocks["hirsch_mixed"],
            num_trials=80,
            instructions=(
                "Mixed block: The task switches randomly between trials.\n\n"
                "The border style tells you which task to do:\n"
                "  Dotted = MOVEMENT (left hand: A/D)\n"
                "  Dashed = ORIENTATION (right hand: J/L)\n\n"
                "Press any key to begin."
            ),
        ),
        SessionBlock(
            block=blocks["hirsch_prp"],
            num_trials=120,
            instructions=(
                "Dual-task (PRP) block: Two tasks per trial.\n\n"
                "Respond to the FIRST task, then the SECOND task.\n"
                "MOVEMENT (left hand): A = left, D = right.\n"
                "ORIENTATION (right hand): J = left, L = right.\n\n"
                "The delay between tasks will vary.\n\n"
                "Press any key to begin."
            ),
        ),
    ]
    return SessionConfig(
        blocks=entries,
        seed=seed,
        metadata={"name": "hirsch_2018_replication"},
    )


PRESETS: Dict[str, Callable[..., SessionConfig]] = {
    "hirsch": hirsch_session,
}


def list_presets() -> List[str]:
    return sorted(PRESETS)


def get_preset(name: str, seed=None) -> SessionConfig:
    """Return a fresh copy of preset ``name``.

    Raises:
        KeyError: If no preset has that name.
    """
    if name not in PRESETS:
        raise KeyError(f"Unknown preset '{name}'. Available: {', '.join(list_presets())}")
    return PRESETS[name](seed=seed)
