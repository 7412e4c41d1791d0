"""Default Task Ordering — tests for the pure composite score.

Tests cover:
    - undated tasks score as due one week from now
    - dated tasks score by their due date
    - importance outweighs due date
    - completion nudges a task later
"""

from taskdata.core.date_utils import ONE_DAY, ONE_WEEK
from taskdata.core.domain_types import (
    IMPORTANCE_DO_NOW,
    IMPORTANCE_MUST_DO,
    IMPORTANCE_NONE,
    IMPORTANCE_SHOULD_DO,
)
from taskdata.core.task_order import (
    ORDER_COMPLETION_WEIGHT,
    ORDER_IMPORTANCE_WEIGHT,
    task_order_score,
)

NOW = 1_700_000_000_000


def test_undated_task_scores_as_due_in_one_week():
    score = task_order_score(due_date=0, importance=2, completion_date=5, now=NOW)
    assert score == NOW + ONE_WEEK + 200_000_000 * 2 + 2 * 5


def test_dated_task_scores_by_due_date():
    due = NOW + 3 * ONE_DAY
    score = task_order_score(due_date=due, importance=1, completion_date=0, now=NOW)
    assert score == due + 200_000_000 * 1


def test_dated_score_ignores_now():
    due = NOW - ONE_DAY
    assert task_order_score(due, 0, 0, now=NOW) == task_order_score(due, 0, 0, now=0)


def test_weights():
    assert ORDER_IMPORTANCE_WEIGHT == 200_000_000
    assert ORDER_COMPLETION_WEIGHT == 2


def test_importance_outweighs_a_day_of_due_date():
    urgent_later = task_order_score(NOW + ONE_DAY, 0, 0, NOW)
    lax_sooner = task_order_score(NOW, 1, 0, NOW)
    assert urgent_later < lax_sooner


def test_completed_task_sorts_after_identical_open_task():
    open_score = task_order_score(NOW, 2, 0, NOW)
    done_score = task_order_score(NOW, 2, NOW, NOW)
    assert open_score < done_score


def test_importance_levels_sort_in_scale_order():
    levels = [IMPORTANCE_NONE, IMPORTANCE_SHOULD_DO, IMPORTANCE_MUST_DO, IMPORTANCE_DO_NOW]
    scores = [task_order_score(NOW, level, 0, NOW) for level in levels]
    assert scores == sorted(scores, reverse=True)
    assert len(set(scores)) == len(levels)
