"""Trial generation core.

Modules:
    sampling: Distribution sampler and generator factory
    sequences: Task, transition and congruency sequences
    directions: Per-channel direction assignment
    params: Parameter builder (routing, timing, silencing, offset correction)
    block: Block trial orchestrator
    session: Session planning and the runner-owned trial log
    responses: Response key maps and key-press scoring
    visualization: Trial timeline figures
"""

from trialforge.core.block import Trial, TrialMeta, generate_block_trials
from trialforge.core.directions import Directions, assign_directions
from trialforge.core.params import (
    SEParams,
    TrialSpec,
    Window,
    absolute_schedule,
    build_trial_params,
)
from trialforge.core.responses import response_key_maps, score_key_presses
from trialforge.core.sampling import make_rng, sample_from_distribution
from trialforge.core.sequences import (
    classify_transitions,
    generate_congruency_sequence,
    generate_task_sequence,
)
from trialforge.core.session import BlockPlan, SessionLog, generate_session

__all__ = [
    "Trial",
    "TrialMeta",
    "generate_block_trials",
    "Directions",
    "assign_directions",
    "SEParams",
    "TrialSpec",
    "Window",
    "absolute_schedule",
    "build_trial_params",
    "response_key_maps",
    "score_key_presses",
    "make_rng",
    "sample_from_distribution",
    "classify_transitions",
    "generate_congruency_sequence",
    "generate_task_sequence",
    "BlockPlan",
    "SessionLog",
    "generate_session",
]
