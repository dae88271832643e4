"""Block and session configuration schema and YAML loading."""

from trialforge.config.schema import (
    BlockConfig,
    CoherenceSpec,
    CongruencySpec,
    DistributionSpec,
    SessionBlock,
    SessionConfig,
)
from trialforge.config.yaml_utils import load_yaml, load_yaml_file

__all__ = [
    "BlockConfig",
    "CoherenceSpec",
    "CongruencySpec",
    "DistributionSpec",
    "SessionBlock",
    "SessionConfig",
    "load_yaml",
    "load_yaml_file",
]
