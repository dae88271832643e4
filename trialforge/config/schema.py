"""Configuration schema for TrialForge blocks and sessions.

A session is an ordered list of blocks. Each block is declared by an
immutable :class:`BlockConfig` (paradigm, tasks, sequencing, timing base
values, coherences, congruency proportions and ITI/SOA distributions) plus a
trial count. The same structures are produced from YAML, from the built-in
presets, and by hand in Python.

Example:
    >>> from trialforge.config.schema import SessionConfig
    >>> session = SessionConfig.from_yaml(yaml_text)
    >>> problems = session.validate()
    >>> yaml_text2 = session.to_yaml()
"""

from __future__ import annotations

from dataclasses import dataclass, field
import math
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import yaml

from trialforge.constants import (
    CONGRUENCY_LABELS,
    DUAL_TASK,
    PARADIGMS,
    RSO_MODES,
    SINGLE_TASK,
    TASKS,
    UNIVALENT,
)
from trialforge.config.yaml_utils import load_yaml, load_yaml_file


def _pick(cls, data: Dict[str, Any]) -> Dict[str, Any]:
    """Keep only the keys of ``data`` that are fields of dataclass ``cls``."""
    return {k: data[k] for k in cls.__dataclass_fields__ if k in data}


@dataclass(frozen=True)
class DistributionSpec:
    """Declarative description of a scalar timing distribution.

    Attributes:
        type: ``fixed``, ``uniform`` or ``choice`` (or any registered type).
        value: Returned by ``fixed``; fallback for ``uniform``/``choice``
            when ``params`` is unusable.
        params: ``[min, max]`` for ``uniform`` (either order), candidate
            values for ``choice``; ignored by ``fixed``.
    """
    type: str = "fixed"
    value: float = 0
    params: Tuple[float, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "params", tuple(self.params or ()))

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "value": self.value, "params": list(self.params)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> DistributionSpec:
        return cls(**_pick(cls, data))

    @classmethod
    def fixed(cls, value: float) -> DistributionSpec:
        return cls(type="fixed", value=value)

    def validate(self, label: str) -> List[str]:
        from trialforge.core.sampling import DISTRIBUTION_REGISTRY

        errors = []
        if not DISTRIBUTION_REGISTRY.is_registered(self.type):
            errors.append(
                f"{label}: unknown distribution type '{self.type}'. "
                f"Valid: {DISTRIBUTION_REGISTRY.list_registered()}"
            )
        if self.type == "uniform" and len(self.params) < 2:
            errors.append(f"{label}: uniform requires params [min, max]")
        if self.type == "choice" and not self.params:
            errors.append(f"{label}: choice requires non-empty params")
        return errors


@dataclass(frozen=True)
class CoherenceSpec:
    """Per-channel task and distractor signal strengths, each in [0, 1].

    A strength of 0 silences the corresponding pathway.
    """
    ch1_task: float = 0.8
    ch1_distractor: float = 0.0
    ch2_task: float = 0.0
    ch2_distractor: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ch1_task": self.ch1_task,
            "ch1_distractor": self.ch1_distractor,
            "ch2_task": self.ch2_task,
            "ch2_distractor": self.ch2_distractor,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> CoherenceSpec:
        return cls(**_pick(cls, data))


@dataclass(frozen=True)
class CongruencySpec:
    """Congruency conditions and their block proportions (summing to 1)."""
    conditions: Tuple[str, ...] = (UNIVALENT,)
    proportions: Tuple[float, ...] = (1.0,)

    def __post_init__(self) -> None:
        object.__setattr__(self, "conditions", tuple(self.conditions))
        object.__setattr__(self, "proportions", tuple(self.proportions))

    def to_dict(self) -> Dict[str, Any]:
        return {"conditions": list(self.conditions), "proportions": list(self.proportions)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> CongruencySpec:
        return cls(**_pick(cls, data))


@dataclass(frozen=True)
class BlockConfig:
    """Immutable declaration of one experimental block.

    Attributes:
        block_id: Unique block identifier (e.g., ``hirsch_prp``).
        block_type: Free label used in analysis (``pure``, ``mixed``, ``prp``).
        paradigm: ``single-task`` or ``dual-task``.
        task1: Channel-1 task; for dual-task blocks also the first T1.
        task2: Channel-2 task, ``None`` for single-task blocks.
        sequence_type: Task-sequence scheme (``Random`` or ``AABB``).
        switch_rate: Percent probability (0-100) of a task switch per trial.
        start_task: First task of single-task blocks, ``None`` for a coin flip.
        csi: Cue-stimulus interval in ms.
        stimulus_duration: Stimulus duration per channel in ms.
        response_window: Go-signal duration in ms.
        coherence: Task/distractor coherences per channel.
        congruency: Congruency conditions and proportions.
        iti: Inter-trial interval distribution (ms).
        soa: Stimulus-onset asynchrony distribution (ms), dual-task only.
        rso: Response-set overlap, ``identical`` or ``disjoint``.
    """
    block_id: str
    paradigm: str = SINGLE_TASK
    block_type: str = "pure"
    task1: str = "mov"
    task2: Optional[str] = None
    sequence_type: str = "Random"
    switch_rate: float = 0.0
    start_task: Optional[str] = None
    csi: float = 200
    stimulus_duration: float = 300
    response_window: float = 2000
    coherence: CoherenceSpec = field(default_factory=CoherenceSpec)
    congruency: CongruencySpec = field(default_factory=CongruencySpec)
    iti: DistributionSpec = field(default_factory=lambda: DistributionSpec.fixed(500))
    soa: DistributionSpec = field(default_factory=lambda: DistributionSpec.fixed(0))
    rso: str = "identical"

    @property
    def is_dual_task(self) -> bool:
        return self.paradigm == DUAL_TASK

    def to_dict(self) -> Dict[str, Any]:
        """Convert to plain dict for YAML serialization."""
        return {
            "block_id": self.block_id,
            "block_type": self.block_type,
            "paradigm": self.paradigm,
            "task1": self.task1,
            "task2": self.task2,
            "sequence_type": self.sequence_type,
            "switch_rate": self.switch_rate,
            "start_task": self.start_task,
            "csi": self.csi,
            "stimulus_duration": self.stimulus_duration,
            "response_window": self.response_window,
            "coherence": self.coherence.to_dict(),
            "congruency": self.congruency.to_dict(),
            "iti": self.iti.to_dict(),
            "soa": self.soa.to_dict(),
            "rso": self.rso,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> BlockConfig:
        """Create from dict (e.g., from YAML).

        Nested ``coherence``, ``congruency``, ``iti`` and ``soa`` mappings
        are converted to their spec classes and a ``null`` value falls back
        to the field default; unknown keys are ignored.

        Raises:
            ValueError: If ``block_id`` is missing or a nested field is
                neither a mapping nor ``null``.
        """
        if "block_id" not in data:
            raise ValueError("Block configuration requires 'block_id'")
        kwargs = _pick(cls, data)
        nested = {
            "coherence": CoherenceSpec,
            "congruency": CongruencySpec,
            "iti": DistributionSpec,
            "soa": DistributionSpec,
        }
        for key, spec_cls in nested.items():
            value = kwargs.get(key)
            if value is None:
                kwargs.pop(key, None)
            elif isinstance(value, dict):
                kwargs[key] = spec_cls.from_dict(value)
            elif not isinstance(value, spec_cls):
                raise ValueError(
                    f"Block '{data['block_id']}': {key} must be a mapping, "
                    f"got {type(value).__name__}"
                )
        return cls(**kwargs)

    def validate(self) -> List[str]:
        """Collect configuration problems without raising.

        Returns:
            List of human-readable problems; empty when the block is valid.
        """
        errors = []
        label = f"Block '{self.block_id}'"

        if self.paradigm not in PARADIGMS:
            errors.append(f"{label}: invalid paradigm '{self.paradigm}'. Valid: {list(PARADIGMS)}")
        if self.task1 not in TASKS:
            errors.append(f"{label}: invalid task1 '{self.task1}'. Valid: {list(TASKS)}")
        if self.paradigm == DUAL_TASK:
            if self.task2 is None:
                errors.append(f"{label}: dual-task blocks require task2")
            elif self.task2 not in TASKS:
                errors.append(f"{label}: invalid task2 '{self.task2}'. Valid: {list(TASKS)}")
            elif self.task2 == self.task1:
                errors.append(f"{label}: task2 must differ from task1")
        elif self.task2 is not None:
            errors.append(f"{label}: single-task blocks must not set task2")
        if self.start_task is not None and self.start_task not in TASKS:
            errors.append(f"{label}: invalid start_task '{self.start_task}'. Valid: {list(TASKS)}")

        from trialforge.core.sequences import SEQUENCE_REGISTRY

        if not SEQUENCE_REGISTRY.is_registered(self.sequence_type):
            errors.append(
                f"{label}: unknown sequence_type '{self.sequence_type}'. "
                f"Valid: {SEQUENCE_REGISTRY.list_registered()}"
            )
        if not 0 <= self.switch_rate <= 100:
            errors.append(f"{label}: switch_rate must be within [0, 100], got {self.switch_rate}")

        for name in ("csi", "stimulus_duration", "response_window"):
            if getattr(self, name) < 0:
                errors.append(f"{label}: {name} must be non-negative")

        for name, value in self.coherence.to_dict().items():
            if not 0 <= value <= 1:
                errors.append(f"{label}: coherence.{name} must be within [0, 1], got {value}")

        conditions = self.congruency.conditions
        proportions = self.congruency.proportions
        if not conditions:
            errors.append(f"{label}: congruency requires at least one condition")
        if len(conditions) != len(proportions):
            errors.append(f"{label}: congruency conditions and proportions differ in length")
        elif proportions and not math.isclose(sum(proportions), 1.0, abs_tol=1e-6):
            errors.append(f"{label}: congruency proportions must sum to 1, got {sum(proportions)}")
        for condition in conditions:
            if condition not in CONGRUENCY_LABELS:
                errors.append(
                    f"{label}: unknown congruency '{condition}'. Valid: {list(CONGRUENCY_LABELS)}"
                )

        errors.extend(self.iti.validate(f"{label}: iti"))
        if self.paradigm == DUAL_TASK:
            errors.extend(self.soa.validate(f"{label}: soa"))
        if self.rso not in RSO_MODES:
            errors.append(f"{label}: invalid rso '{self.rso}'. Valid: {list(RSO_MODES)}")
        return errors


@dataclass
class SessionBlock:
    """A block configuration scheduled with its trial count and instructions."""
    block: BlockConfig
    num_trials: int
    instructions: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result = {"num_trials": self.num_trials, "block": self.block.to_dict()}
        if self.instructions is not None:
            result["instructions"] = self.instructions
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> SessionBlock:
        """Create from ``{num_trials, instructions, block: {...}}``.

        A flat mapping that holds the block fields next to ``num_trials`` is
        accepted as well.
        """
        if "num_trials" not in data:
            raise ValueError("Session block requires 'num_trials'")
        block_data = data.get("block", data)
        return cls(
            block=BlockConfig.from_dict(block_data),
            num_trials=data["num_trials"],
            instructions=data.get("instructions"),
        )


@dataclass
class SessionConfig:
    """Ordered list of blocks making up one experimental session.

    Attributes:
        blocks: Blocks in presentation order.
        seed: Optional seed making the whole session reproducible.
        metadata: Free-form metadata (name, version, ...).
    """
    blocks: List[SessionBlock] = field(default_factory=list)
    seed: Optional[int] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to plain dict for YAML serialization."""
        result: Dict[str, Any] = {"metadata": self.metadata}
        if self.seed is not None:
            result["seed"] = self.seed
        result["blocks"] = [b.to_dict() for b in self.blocks]
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> SessionConfig:
        """Create from a session mapping or a single-block mapping."""
        if "blocks" in data:
            blocks = [SessionBlock.from_dict(b) for b in data["blocks"]]
        else:
            blocks = [SessionBlock.from_dict(data)]
        return cls(
            blocks=blocks,
            seed=data.get("seed"),
            metadata=data.get("metadata", {}),
        )

    def to_yaml(self) -> str:
        return yaml.dump(
            self.to_dict(),
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
        )

    @classmethod
    def from_yaml(cls, yaml_str: str) -> SessionConfig:
        data = load_yaml(yaml_str)
        if not isinstance(data, dict):
            raise ValueError("YAML did not produce a dict")
        return cls.from_dict(data)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> SessionConfig:
        data = load_yaml_file(path)
        if not isinstance(data, dict):
            raise ValueError(f"Config file does not contain a mapping: {path}")
        return cls.from_dict(data)

    def validate(self) -> List[str]:
        errors = []
        if not self.blocks:
            errors.append("Session has no blocks")
        seen = set()
        for entry in self.blocks:
            block_id = entry.block.block_id
            if block_id in seen:
                errors.append(f"Duplicate block_id '{block_id}'")
            seen.add(block_id)
            if not isinstance(entry.num_trials, int) or entry.num_trials < 1:
                errors.append(
                    f"Block '{block_id}': num_trials must be a positive integer, "
                    f"got {entry.num_trials!r}"
                )
            errors.extend(entry.block.validate())
        return errors
