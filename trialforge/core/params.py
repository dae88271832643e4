"""Trial parameter builder for the stimulus-presentation engine.

Maps an abstract trial description (which task runs on which channel,
timing base values, coherences and directions) onto the engine's flat
record of 26 fields: two channels, each with a cue, a go signal and two
perceptual pathways (movement ``mov`` and orientation ``or``).

Two engine behaviours shape the algorithm:

1. A pathway with coherence 0 is drawn as visible random noise, so an
   inactive pathway has to be silenced by zeroing its ``start`` and ``dur``.
2. A channel-2 pathway is placed relative to the end of its channel-1
   counterpart: ``absolute_start = start_field + ch1_pathway.end``.

Silencing changes channel-1 end times, so channel-2 offsets are corrected
in a separate pass after silencing::

    route_coherence -> route_directions -> build_tentative_timing
        -> silence_inactive_pathways -> correct_channel2_offsets

Example:
    >>> spec = TrialSpec(task1='mov', task2='or', csi=200, dur_ch1=300,
    ...                  dur_ch2=300, soa=100, response_window=2000,
    ...                  coherence=CoherenceSpec(0.8, 0.0, 0.6, 0.0),
    ...                  directions=Directions(180, 0, 0, 0))
    >>> build_trial_params(spec).start_or_2
    300
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields, replace
import math
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from trialforge.config.schema import CoherenceSpec
from trialforge.constants import TASK_MOVEMENT, TASK_ORIENTATION, check_task, complement_task
from trialforge.core.directions import Directions
from trialforge.errors import InvariantViolation, MissingRequiredField

PATHWAYS = (TASK_MOVEMENT, TASK_ORIENTATION)
CHANNELS = (1, 2)
DIRECTION_FIELDS = ("ch1_task", "ch1_distractor", "ch2_task", "ch2_distractor")

PathwayKey = Tuple[str, int]


@dataclass(frozen=True)
class Window:
    """A time window in ms."""
    start: float = 0
    dur: float = 0

    @property
    def end(self) -> float:
        return self.start + self.dur


SILENT = Window(0, 0)


@dataclass(frozen=True)
class TrialSpec:
    """Abstract description of one trial, consumed by :func:`build_trial_params`.

    Attributes:
        task1: Task on channel 1 (``'mov'`` or ``'or'``).
        task2: Task on channel 2, ``None`` for single-task trials.
        csi: Cue-stimulus interval of channel 1 in ms.
        dur_ch1: Stimulus duration of channel 1 in ms.
        dur_ch2: Stimulus duration of channel 2 in ms.
        soa: Onset asynchrony between channel 1 and channel 2 in ms.
        response_window: Go-signal duration in ms.
        coherence: Task/distractor coherence per channel.
        directions: Task/distractor direction per channel, either a
            :class:`Directions` or a mapping with the same keys.
    """
    task1: str
    task2: Optional[str]
    csi: float
    dur_ch1: float
    dur_ch2: float
    soa: float
    response_window: float
    coherence: CoherenceSpec
    directions: Union[Directions, Mapping[str, Any]]


@dataclass(frozen=True)
class TimingPlan:
    """Cue, go-signal and pathway windows as handed to the engine.

    Channel-2 pathway windows hold the engine's relative start offsets;
    everything else is absolute.
    """
    cue: Tuple[Window, Window]
    go: Tuple[Window, Window]
    pathways: Mapping[PathwayKey, Window]


@dataclass(frozen=True)
class SEParams:
    """Flat parameter record for one trial of the presentation engine."""
    task_1: str
    task_2: Optional[str]
    start_1: float
    dur_1: float
    start_go_1: float
    dur_go_1: float
    start_2: float
    dur_2: float
    start_go_2: float
    dur_go_2: float
    start_mov_1: float
    dur_mov_1: float
    coh_mov_1: float
    dir_mov_1: int
    start_or_1: float
    dur_or_1: float
    coh_or_1: float
    dir_or_1: int
    start_mov_2: float
    dur_mov_2: float
    coh_mov_2: float
    dir_mov_2: int
    start_or_2: float
    dur_or_2: float
    coh_or_2: float
    dir_or_2: int

    def to_dict(self) -> Dict[str, Any]:
        """Field name → value, in engine order."""
        return asdict(self)

    def pathway(self, pathway: str, channel: int) -> Window:
        return Window(
            getattr(self, f"start_{pathway}_{channel}"),
            getattr(self, f"dur_{pathway}_{channel}"),
        )

    def coherence_of(self, pathway: str, channel: int) -> float:
        return getattr(self, f"coh_{pathway}_{channel}")

    def check_invariants(self) -> None:
        """Verify the output invariants of a built record.

        Raises:
            InvariantViolation: If a numeric field is NaN, a zero-coherence
                pathway has non-zero timing, or an active channel-2 pathway
                does not start at the channel-2 onset once chained.
        """
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, float) and math.isnan(value):
                raise InvariantViolation(f"{f.name} is NaN")
            if value is None and f.name != "task_2":
                raise InvariantViolation(f"{f.name} is None")

        for channel in CHANNELS:
            for pathway in PATHWAYS:
                window = self.pathway(pathway, channel)
                if self.coherence_of(pathway, channel) == 0 and window != SILENT:
                    raise InvariantViolation(
                        f"{pathway}_{channel} has coherence 0 but timing "
                        f"start={window.start}, dur={window.dur}"
                    )

        if self.task_2 is None:
            return
        schedule = absolute_schedule(self)
        for pathway in PATHWAYS:
            window = schedule[f"{pathway}_2"]
            if window.dur > 0 and not math.isclose(window.start, self.start_2, abs_tol=1e-9):
                raise InvariantViolation(
                    f"{pathway}_2 starts at {window.start}, expected {self.start_2}"
                )


def absolute_schedule(params: SEParams) -> Dict[str, Window]:
    """Resolve the engine's chaining into absolute windows.

    Channel-2 pathways start at ``start_field + ch1_counterpart.end``;
    all other windows are already absolute.
    """
    schedule = {
        "cue_1": Window(params.start_1, params.dur_1),
        "go_1": Window(params.start_go_1, params.dur_go_1),
    }
    for pathway in PATHWAYS:
        schedule[f"{pathway}_1"] = params.pathway(pathway, 1)
    schedule["cue_2"] = Window(params.start_2, params.dur_2)
    schedule["go_2"] = Window(params.start_go_2, params.dur_go_2)
    for pathway in PATHWAYS:
        relative = params.pathway(pathway, 2)
        if relative.dur > 0:
            anchor = params.pathway(pathway, 1).end
            schedule[f"{pathway}_2"] = Window(relative.start + anchor, relative.dur)
        else:
            schedule[f"{pathway}_2"] = SILENT
    return schedule


def _route(
    task1: str,
    task2: Optional[str],
    values: Mapping[str, Any],
    empty: Any = 0,
) -> Dict[PathwayKey, Any]:
    """Place task/distractor values on the physical pathways.

    Channel-2 pathways get ``empty`` when there is no second task.
    """
    routed = {
        (check_task(task1), 1): values["ch1_task"],
        (complement_task(task1), 1): values["ch1_distractor"],
    }
    if task2 is None:
        routed[(TASK_MOVEMENT, 2)] = empty
        routed[(TASK_ORIENTATION, 2)] = empty
    else:
        routed[(check_task(task2), 2)] = values["ch2_task"]
        routed[(complement_task(task2), 2)] = values["ch2_distractor"]
    return routed


def route_coherence(spec: TrialSpec) -> Dict[PathwayKey, float]:
    """Map task/distractor coherences onto the movement/orientation pathways.

    The task named by ``task1`` receives ``ch1_task`` and the other pathway
    of channel 1 receives ``ch1_distractor``; likewise for channel 2. Both
    channel-2 coherences are 0 when there is no second task.
    """
    return _route(spec.task1, spec.task2, spec.coherence.to_dict())


def route_directions(
    spec: TrialSpec, coherence: Mapping[PathwayKey, float]
) -> Dict[PathwayKey, int]:
    """Map directions onto pathways with the same routing as coherence.

    A direction is required only for pathways left active by ``coherence``;
    a silenced pathway without a direction gets 0.

    Raises:
        MissingRequiredField: If an active pathway has no direction.
    """
    source = spec.directions
    if isinstance(source, Directions):
        source = source.to_dict()
    names = _route(
        spec.task1, spec.task2, {name: name for name in DIRECTION_FIELDS}, empty=None
    )

    routed = {}
    for key in coherence:
        name = names[key]
        value = source.get(name) if name is not None else None
        if value is None:
            if coherence[key] > 0:
                pathway, channel = key
                raise MissingRequiredField(
                    f"Direction '{name}' is required for active pathway {pathway}_{channel}"
                )
            value = 0
        routed[key] = value
    return routed


def build_tentative_timing(spec: TrialSpec) -> TimingPlan:
    """Assemble cue, go and pathway windows before silencing.

    Channel 1: cue over ``[0, csi + dur_ch1)``, go signal at ``csi`` for
    ``response_window``, both pathways over ``[csi, csi + dur_ch1)``.

    Channel 2 (only with a second task): cue and go signal at the absolute
    onset ``csi + soa`` (channel 2 has no cue-stimulus interval of its own);
    pathways start at the relative offset ``soa - dur_ch1``, which assumes
    the channel-1 counterpart ends at ``csi + dur_ch1``.
    """
    cue1 = Window(0, spec.csi + spec.dur_ch1)
    go1 = Window(spec.csi, spec.response_window)
    pathways = {(p, 1): Window(spec.csi, spec.dur_ch1) for p in PATHWAYS}

    if spec.task2 is None:
        cue2 = go2 = SILENT
        pathways.update({(p, 2): SILENT for p in PATHWAYS})
    else:
        onset = spec.csi + spec.soa
        cue2 = Window(onset, spec.dur_ch2)
        go2 = Window(onset, spec.response_window)
        offset = spec.soa - spec.dur_ch1
        pathways.update({(p, 2): Window(offset, spec.dur_ch2) for p in PATHWAYS})

    return TimingPlan(cue=(cue1, cue2), go=(go1, go2), pathways=pathways)


def silence_inactive_pathways(
    timing: TimingPlan, coherence: Mapping[PathwayKey, float]
) -> TimingPlan:
    """Zero start and duration of every pathway whose coherence is 0."""
    pathways = {
        key: SILENT if coherence[key] == 0 else window
        for key, window in timing.pathways.items()
    }
    return replace(timing, pathways=pathways)


def correct_channel2_offsets(timing: TimingPlan, spec: TrialSpec) -> TimingPlan:
    """Recompute channel-2 offsets from post-silencing channel-1 end times.

    Each active channel-2 pathway gets ``(csi + soa) - ch1_counterpart.end``
    so that the engine's chaining puts it at the channel-2 onset. The offset
    may be negative when the counterpart runs past that onset. Silenced
    channel-2 pathways stay at zero.
    """
    if spec.task2 is None:
        return timing
    desired_start = spec.csi + spec.soa
    pathways = dict(timing.pathways)
    for pathway in PATHWAYS:
        window = pathways[(pathway, 2)]
        if window.dur > 0:
            anchor = pathways[(pathway, 1)].end
            pathways[(pathway, 2)] = Window(desired_start - anchor, window.dur)
    return replace(timing, pathways=pathways)


def _assemble(
    spec: TrialSpec,
    timing: TimingPlan,
    coherence: Mapping[PathwayKey, float],
    directions: Mapping[PathwayKey, int],
) -> SEParams:
    values: Dict[str, Any] = {"task_1": spec.task1, "task_2": spec.task2}
    for index, channel in enumerate(CHANNELS):
        values[f"start_{channel}"] = timing.cue[index].start
        values[f"dur_{channel}"] = timing.cue[index].dur
        values[f"start_go_{channel}"] = timing.go[index].start
        values[f"dur_go_{channel}"] = timing.go[index].dur
    for channel in CHANNELS:
        for pathway in PATHWAYS:
            key = (pathway, channel)
            values[f"start_{pathway}_{channel}"] = timing.pathways[key].start
            values[f"dur_{pathway}_{channel}"] = timing.pathways[key].dur
            values[f"coh_{pathway}_{channel}"] = coherence[key]
            values[f"dir_{pathway}_{channel}"] = directions[key]
    return SEParams(**values)


def build_trial_params(spec: TrialSpec) -> SEParams:
    """Build the engine record for one trial.

    Raises:
        UnknownTaskError: If a task label is not ``'mov'``/``'or'``.
        MissingRequiredField: If an active pathway lacks a direction.
        InvariantViolation: If the result breaks an output invariant.
    """
    coherence = route_coherence(spec)
    directions = route_directions(spec, coherence)
    timing = build_tentative_timing(spec)
    timing = silence_inactive_pathways(timing, coherence)
    timing = correct_channel2_offsets(timing, spec)
    params = _assemble(spec, timing, coherence, directions)
    params.check_invariants()
    return params
