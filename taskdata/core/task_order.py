"""Default Task Ordering — the numeric score tasks are sorted by (ascending).

Invariants:
    - task_order_score is PURE: no clock read, `now` is an argument
    - score = effective_due + ORDER_IMPORTANCE_WEIGHT * importance
              + ORDER_COMPLETION_WEIGHT * completion_date
    - effective_due = now + ONE_WEEK when due_date == 0, else due_date

Design Decisions:
    - Undated tasks sort as if due in a week: deprioritized, not pushed to infinity
    - Importance weight dwarfs any realistic due-date gap, so importance dominates
    - Completed tasks drift later by their completion timestamp
    - SQL twin lives in models/criteria.py (default_task_order); both read these constants
"""

from taskdata.core.date_utils import ONE_WEEK


ORDER_IMPORTANCE_WEIGHT: int = 200_000_000
ORDER_COMPLETION_WEIGHT: int = 2
UNDATED_OFFSET: int = ONE_WEEK


def task_order_score(
    due_date: int, importance: int, completion_date: int, now: int,
) -> int:
    effective_due = now + UNDATED_OFFSET if due_date == 0 else due_date
    return (
        effective_due
        + ORDER_IMPORTANCE_WEIGHT * importance
        + ORDER_COMPLETION_WEIGHT * completion_date
    )
