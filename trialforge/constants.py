"""Labels shared by the configuration schema and the generation core."""

from trialforge.errors import UnknownTaskError

TASK_MOVEMENT = "mov"
TASK_ORIENTATION = "or"
TASKS = (TASK_MOVEMENT, TASK_ORIENTATION)

SINGLE_TASK = "single-task"
DUAL_TASK = "dual-task"
PARADIGMS = (SINGLE_TASK, DUAL_TASK)

CONGRUENT = "congruent"
INCONGRUENT = "incongruent"
NEUTRAL = "neutral"
UNIVALENT = "univalent"
CONGRUENCY_LABELS = (CONGRUENT, INCONGRUENT, NEUTRAL, UNIVALENT)

RSO_IDENTICAL = "identical"
RSO_DISJOINT = "disjoint"
RSO_MODES = (RSO_IDENTICAL, RSO_DISJOINT)

FIRST = "First"
REPEAT = "Repeat"
SWITCH = "Switch"


def check_task(task: str) -> str:
    """Return ``task`` unchanged if it is a known task label.

    Raises:
        UnknownTaskError: For any label other than ``'mov'`` or ``'or'``.
    """
    if task not in TASKS:
        raise UnknownTaskError(f"Unknown task '{task}'. Valid: {list(TASKS)}")
    return task


def complement_task(task: str) -> str:
    """Return the other task of the movement/orientation pair."""
    if check_task(task) == TASK_MOVEMENT:
        return TASK_ORIENTATION
    return TASK_MOVEMENT
