"""Tests for trial timeline figures."""

from matplotlib.figure import Figure

from trialforge.core.block import generate_block_trials
from trialforge.core.visualization import plot_trial_timeline, save_trial_timeline


def test_plot_single_task_rows(single_task_block, rng):
    """Test silenced pathways and empty channel 2 get no bars."""
    trial = generate_block_trials(single_task_block, 1, rng)[0]
    fig = plot_trial_timeline(trial.params)
    assert isinstance(fig, Figure)
    labels = [t.get_text() for t in fig.axes[0].get_yticklabels()]
    assert labels == ["cue_1", "go_1", "mov_1"]


def test_plot_dual_task_includes_channel2(prp_block, rng):
    """Test dual-task trials plot channel-2 windows."""
    trial = generate_block_trials(prp_block, 1, rng)[0]
    fig = plot_trial_timeline(trial.params, title="prp")
    labels = [t.get_text() for t in fig.axes[0].get_yticklabels()]
    assert "cue_2" in labels
    assert fig.axes[0].get_title() == "prp"


def test_save_trial_timeline(prp_block, rng, tmp_path):
    """Test the figure is written to disk."""
    trial = generate_block_trials(prp_block, 1, rng)[0]
    path = save_trial_timeline(trial.params, tmp_path / "trial.png")
    assert path.exists()
    assert path.stat().st_size > 0
