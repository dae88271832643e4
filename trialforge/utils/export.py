"""CSV and JSON export of trial records.

The CSV layout is the fixed column order expected by downstream analysis:
block and trial identifiers, task/transition/congruency labels, ITI/SOA,
directions, then the response columns a runner adds after scoring. Empty
cells stand for ``None`` or missing values.
"""

from __future__ import annotations

import csv
import io
import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

TRIAL_COLUMNS = [
    "block_order",
    "block_id",
    "block_type",
    "paradigm",
    "trial_number",
    "task",
    "task2",
    "transition_type",
    "congruency",
    "previous_congruency",
    "iti",
    "soa",
    "primary_direction",
    "distractor_direction",
    "ch2_direction",
    "rt1",
    "accuracy1",
    "rt2",
    "accuracy2",
    "rt1_raw",
    "rt2_raw",
]


def plan_rows(plans: Iterable[Any]) -> List[Dict[str, Any]]:
    """Flatten block plans into metadata rows tagged with ``block_order``."""
    rows = []
    for plan in plans:
        for trial in plan.trials:
            row = trial.meta.to_dict()
            row["block_order"] = plan.block_order
            rows.append(row)
    return rows


def format_csv(
    rows: Iterable[Mapping[str, Any]],
    columns: Sequence[str] = TRIAL_COLUMNS,
) -> str:
    """Render rows as CSV text with a header line."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(columns)
    for row in rows:
        writer.writerow(["" if row.get(col) is None else row.get(col) for col in columns])
    return buffer.getvalue()


def write_trials_csv(
    rows: Iterable[Mapping[str, Any]],
    path: Union[str, Path],
    columns: Sequence[str] = TRIAL_COLUMNS,
) -> Path:
    path = Path(path)
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(format_csv(rows, columns))
    return path


def write_plan_json(
    plans: Iterable[Any],
    path: Union[str, Path],
    metadata: Optional[Mapping[str, Any]] = None,
) -> Path:
    """Write block plans (parameters and metadata of every trial) as JSON."""
    path = Path(path)
    document = {
        "metadata": {
            **(metadata or {}),
            "generated": datetime.now().isoformat(),
        },
        "blocks": [plan.to_dict() for plan in plans],
    }
    with open(path, "w", encoding="utf-8") as f:
        json.dump(document, f, indent=2)
    return path
