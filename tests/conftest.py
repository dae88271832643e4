"""
Test configuration and fixtures for the trial generation project.
"""
import sys
from pathlib import Path

import matplotlib
import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

matplotlib.use("Agg")

from trialforge.config.schema import (  # noqa: E402
    BlockConfig,
    CoherenceSpec,
    CongruencySpec,
    DistributionSpec,
    SessionBlock,
    SessionConfig,
)
from trialforge.core.sampling import make_rng  # noqa: E402


@pytest.fixture
def rng():
    """Seeded generator so a test sees the same draws on every run."""
    return make_rng(1234)


@pytest.fixture
def single_task_block():
    """Pure movement block with univalent stimuli."""
    return BlockConfig(
        block_id="pure_mov",
        paradigm="single-task",
        task1="mov",
        start_task="mov",
        csi=200,
        stimulus_duration=300,
        response_window=2000,
        coherence=CoherenceSpec(0.8, 0.0, 0.0, 0.0),
        iti=DistributionSpec(type="uniform", value=500, params=(400, 600)),
    )


@pytest.fixture
def bivalent_block():
    """Mixed single-task block with all three bivalent congruency conditions."""
    return BlockConfig(
        block_id="bivalent",
        block_type="mixed",
        paradigm="single-task",
        task1="mov",
        switch_rate=50,
        csi=200,
        stimulus_duration=300,
        response_window=2000,
        coherence=CoherenceSpec(0.8, 0.4, 0.0, 0.0),
        congruency=CongruencySpec(
            conditions=("congruent", "incongruent", "neutral"),
            proportions=(0.4, 0.4, 0.2),
        ),
    )


@pytest.fixture
def prp_block():
    """Dual-task block with SOA drawn from a choice distribution."""
    return BlockConfig(
        block_id="prp",
        block_type="prp",
        paradigm="dual-task",
        task1="mov",
        task2="or",
        switch_rate=50,
        csi=200,
        stimulus_duration=300,
        response_window=2000,
        coherence=CoherenceSpec(0.8, 0.0, 0.6, 0.0),
        soa=DistributionSpec(type="choice", value=100, params=(50, 100, 200, 400, 600, 1000)),
        rso="disjoint",
    )


@pytest.fixture
def small_session(single_task_block, prp_block):
    """Two-block session with a fixed seed."""
    return SessionConfig(
        blocks=[
            SessionBlock(block=single_task_block, num_trials=6, instructions="Movement only."),
            SessionBlock(block=prp_block, num_trials=8),
        ],
        seed=7,
        metadata={"name": "small"},
    )
