"""Trial timeline figures.

Draws the absolute schedule of one trial (cues, go signals and active
pathways of both channels) as horizontal bars. Channel-2 pathways are
shown where the engine will actually place them, after chaining.
"""

from pathlib import Path
from typing import Optional, Union

from matplotlib.figure import Figure

from trialforge.core.params import SEParams, absolute_schedule

ROW_ORDER = ["cue_1", "go_1", "mov_1", "or_1", "cue_2", "go_2", "mov_2", "or_2"]
ROW_COLORS = {
    "cue": (0.55, 0.55, 0.55),
    "go": (0.85, 0.55, 0.15),
    "mov": (0.26, 0.53, 0.96),
    "or": (0.20, 0.70, 0.40),
}


def plot_trial_timeline(params: SEParams, title: Optional[str] = None) -> Figure:
    """Build a figure with one bar per non-empty window of ``params``."""
    schedule = absolute_schedule(params)
    rows = [name for name in ROW_ORDER if schedule[name].dur > 0]

    fig = Figure(figsize=(8.0, 0.45 * max(len(rows), 1) + 1.2), dpi=100)
    ax = fig.add_subplot(111)
    for y, name in enumerate(rows):
        window = schedule[name]
        kind = name.split("_")[0]
        ax.barh(y, window.dur, left=window.start, height=0.6, color=ROW_COLORS[kind])
        label = name
        if kind in ("mov", "or"):
            label = f"{name} coh={params.coherence_of(kind, int(name[-1])):.2f}"
        ax.text(window.start, y, f" {label}", va="center", fontsize=8)

    ax.set_yticks(range(len(rows)))
    ax.set_yticklabels(rows)
    ax.invert_yaxis()
    ax.set_xlabel("Time from trial onset (ms)")
    ax.set_title(title or f"T1={params.task_1}  T2={params.task_2}")
    fig.tight_layout()
    return fig


def save_trial_timeline(
    params: SEParams,
    path: Union[str, Path],
    dpi: int = 150,
    title: Optional[str] = None,
) -> Path:
    """Render :func:`plot_trial_timeline` to ``path``; the format follows the suffix."""
    path = Path(path)
    fig = plot_trial_timeline(params, title=title)
    fig.savefig(path, dpi=dpi, bbox_inches="tight")
    return path
