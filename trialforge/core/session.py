"""Session planning and the runner-owned trial log.

:func:`generate_session` turns a :class:`SessionConfig` into one
:class:`BlockPlan` per block. A presentation runner walks the plans, runs
each trial, and records results in a :class:`SessionLog` it owns; nothing
here keeps process-wide state.

Example:
    >>> session = SessionConfig.from_file("hirsch_session.yml")
    >>> plans = generate_session(session)
    >>> log = SessionLog()
    >>> log.start()
    >>> for plan in plans:
    ...     for trial in plan.trials:
    ...         presses = runner.run(trial.params, plan.key_maps)
    ...         log.record(plan.block_order, trial, score_key_presses(presses, trial))
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

import numpy as np

from trialforge.config.schema import BlockConfig, SessionConfig
from trialforge.core.block import Trial, generate_block_trials
from trialforge.core.responses import response_key_maps
from trialforge.core.sampling import make_rng


@dataclass
class BlockPlan:
    """Generated trials of one session block.

    Attributes:
        block_order: 1-based position of the block in the session.
        config: The block declaration.
        trials: Trials in presentation order.
        key_maps: Response key maps for the block's RSO mode.
        instructions: Instruction text shown before the block, if any.
    """
    block_order: int
    config: BlockConfig
    trials: List[Trial]
    key_maps: Dict[str, Any]
    instructions: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "block_order": self.block_order,
            "block": self.config.to_dict(),
            "instructions": self.instructions,
            "key_maps": self.key_maps,
            "trials": [t.to_dict() for t in self.trials],
        }


def generate_session(
    session: SessionConfig,
    rng: Optional[np.random.Generator] = None,
) -> List[BlockPlan]:
    """Generate every block of a session in presentation order.

    One generator is shared by all blocks. Without ``rng`` it is seeded
    from ``session.seed`` (unseeded when that is ``None``).
    """
    if rng is None:
        rng = make_rng(session.seed)
    plans = []
    for order, entry in enumerate(session.blocks, start=1):
        plans.append(
            BlockPlan(
                block_order=order,
                config=entry.block,
                trials=generate_block_trials(entry.block, entry.num_trials, rng),
                key_maps=response_key_maps(entry.block.rso),
                instructions=entry.instructions,
            )
        )
    return plans


class SessionLog:
    """Accumulated trial rows and the running flag of one session run."""

    def __init__(self) -> None:
        self._rows: List[Dict[str, Any]] = []
        self._running = False

    def start(self) -> None:
        """Begin a run, discarding rows from any previous run."""
        self._rows = []
        self._running = True

    def stop(self) -> None:
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    def record(
        self,
        block_order: int,
        trial: Trial,
        result: Optional[Mapping[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Append one row: the trial metadata, the block order and ``result``."""
        row = trial.meta.to_dict()
        row["block_order"] = block_order
        if result:
            row.update(result)
        self._rows.append(row)
        return row

    @property
    def rows(self) -> List[Dict[str, Any]]:
        return list(self._rows)

    def __len__(self) -> int:
        return len(self._rows)
