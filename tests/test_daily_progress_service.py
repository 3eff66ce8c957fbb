"""Tests for daily progress service."""

from datetime import date
from uuid import UUID, uuid4

import pytest

from calorie_tracker.domain.progress import DailyProgressRow
from calorie_tracker.services.daily_progress import (
    DailyProgressService,
    calculate_status,
)
from tests.conftest import InMemoryDailyProgressRepository


@pytest.mark.parametrize(
    ("total", "status"),
    [
        (0, "under"),
        (1899, "under"),
        (1900, "on_track"),
        (2100, "on_track"),
        (2101, "over"),
    ],
)
def test_calculate_status(total: float, status: str) -> None:
    assert calculate_status(total, 2000) == status


def _row(day: date, user_id: UUID, total: float | None = 1500) -> DailyProgressRow:
    return DailyProgressRow(
        date=day,
        user_id=user_id,
        total_calories=total,
        total_protein=None if total is None else 80,
        total_carbs=None if total is None else 150,
        total_fats=None if total is None else 50,
        calorie_goal=2000,
        percentage=None if total is None else total / 20,
    )


def test_get_progress_from_view() -> None:
    user_id = uuid4()
    repository = InMemoryDailyProgressRepository(
        rows=[_row(date(2025, 10, 30), user_id, total=2050)]
    )

    progress = DailyProgressService(repository).get_progress(
        user_id, date(2025, 10, 30)
    )

    assert progress.total_calories == 2050
    assert progress.status == "on_track"


def test_day_without_meals_uses_goal_in_force() -> None:
    repository = InMemoryDailyProgressRepository(goals={date(2025, 10, 30): 2300})
    service = DailyProgressService(repository)

    progress = service.get_progress(uuid4(), date(2025, 10, 30))

    assert progress.total_calories == 0
    assert progress.calorie_goal == 2300
    assert progress.percentage == 0
    assert progress.status == "under"


def test_day_without_meals_or_goal_defaults_to_2000() -> None:
    service = DailyProgressService(InMemoryDailyProgressRepository())

    progress = service.get_progress(uuid4(), date(2025, 10, 30))

    assert progress.calorie_goal == 2000


def test_null_totals_are_zero() -> None:
    user_id = uuid4()
    repository = InMemoryDailyProgressRepository(
        rows=[_row(date(2025, 10, 30), user_id, total=None)]
    )

    progress = DailyProgressService(repository).get_progress(
        user_id, date(2025, 10, 30)
    )

    assert progress.total_calories == 0
    assert progress.total_fats == 0


def test_list_progress_newest_first_with_total() -> None:
    user_id = uuid4()
    rows = [_row(date(2025, 10, day), user_id) for day in range(1, 11)]
    service = DailyProgressService(InMemoryDailyProgressRepository(rows=rows))

    page = service.list_progress(
        user_id, date_from=date(2025, 10, 3), limit=3, offset=1
    )

    assert page.pagination.total == 8
    assert page.pagination.limit == 3
    assert page.pagination.offset == 1
    assert [entry.date.day for entry in page.data] == [9, 8, 7]
