"""Export helpers for generated trial plans."""

from trialforge.utils.export import (
    TRIAL_COLUMNS,
    format_csv,
    plan_rows,
    write_plan_json,
    write_trials_csv,
)

__all__ = [
    "TRIAL_COLUMNS",
    "format_csv",
    "plan_rows",
    "write_plan_json",
    "write_trials_csv",
]
