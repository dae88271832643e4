"""TrialForge: trial sequence generation for task-switching and PRP experiments.

TrialForge turns declarative block configurations into fully specified
trials for a two-channel visual paradigm. Each trial pairs a movement
(random-dot motion) and an orientation (grating) pathway per channel, and
the generator decides which pathways are shown, when, with what coherence
and in which direction.

Key Components:
    - config: Block and session dataclasses with YAML round-trip
    - core: Sequences, direction assignment, the parameter builder, block
      and session planning, response scoring
    - utils: CSV and JSON export
    - presets: Built-in sessions (Hirsch et al. 2018 replication)
    - cli: Command-line interface for generation and validation

Example:
    >>> from trialforge import BlockConfig, generate_block_trials, make_rng
    >>> block = BlockConfig(block_id="pure_mov")
    >>> trials = generate_block_trials(block, 10, rng=make_rng(1))
    >>> len(trials)
    10
"""

__version__ = "0.1.0"
__author__ = "TrialForge Contributors"
__license__ = "MIT"

from trialforge.config.schema import (
    BlockConfig,
    CoherenceSpec,
    CongruencySpec,
    DistributionSpec,
    SessionBlock,
    SessionConfig,
)
from trialforge.core.block import Trial, TrialMeta, generate_block_trials
from trialforge.core.params import SEParams, TrialSpec, build_trial_params
from trialforge.core.sampling import make_rng
from trialforge.core.session import BlockPlan, SessionLog, generate_session
from trialforge.errors import (
    ConfigurationError,
    InvariantViolation,
    MissingRequiredField,
    TrialForgeError,
)

__all__ = [
    "__version__",
    "__author__",
    "__license__",
    "BlockConfig",
    "CoherenceSpec",
    "CongruencySpec",
    "DistributionSpec",
    "SessionBlock",
    "SessionConfig",
    "Trial",
    "TrialMeta",
    "generate_block_trials",
    "SEParams",
    "TrialSpec",
    "build_trial_params",
    "make_rng",
    "BlockPlan",
    "SessionLog",
    "generate_session",
    "ConfigurationError",
    "InvariantViolation",
    "MissingRequiredField",
    "TrialForgeError",
]
