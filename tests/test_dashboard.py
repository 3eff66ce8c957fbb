"""Tests for the dashboard controller."""

import asyncio
from datetime import date

from calorie_tracker.client.dashboard import DashboardController
from calorie_tracker.client.errors import (
    SERVER_ERROR_MESSAGE,
    UNAUTHORIZED_MESSAGE,
    ApiError,
)
from tests.conftest import FakeApi, progress_days


def test_dashboard_starts_in_loading_state() -> None:
    controller = DashboardController(FakeApi())

    assert controller.state.loading is True
    assert controller.state.days == ()
    assert controller.state.limit == 30


def test_load_more_before_initial_load_is_ignored() -> None:
    api = FakeApi(pages=[progress_days(30)])
    controller = DashboardController(api)

    asyncio.run(controller.load_more_days())

    assert api.calls == []


def test_initial_load_then_short_page_ends_the_list() -> None:
    api = FakeApi(pages=[progress_days(30), progress_days(12)])
    controller = DashboardController(api)

    asyncio.run(controller.load_initial_days())
    assert controller.state.loading is False
    assert controller.state.has_more is True
    assert controller.state.offset == 30

    asyncio.run(controller.load_more_days())
    state = controller.state
    assert len(state.days) == 42
    assert state.offset == 42
    assert state.has_more is False

    asyncio.run(controller.load_more_days())
    assert api.count("list_daily_progress") == 2


def test_initial_load_error_is_shown() -> None:
    api = FakeApi(pages=[ApiError(UNAUTHORIZED_MESSAGE, status=401)])
    controller = DashboardController(api)

    asyncio.run(controller.load_initial_days())

    assert controller.state.error == UNAUTHORIZED_MESSAGE
    assert controller.state.loading is False


def test_refresh_replaces_days() -> None:
    api = FakeApi(pages=[progress_days(30), progress_days(30), progress_days(7)])
    controller = DashboardController(api)
    asyncio.run(controller.load_initial_days())
    asyncio.run(controller.load_more_days())

    asyncio.run(controller.refresh_days())

    state = controller.state
    assert len(state.days) == 7
    assert state.offset == 7
    assert state.refreshing is False
    assert state.has_more is False


def test_load_more_is_ignored_during_refresh() -> None:
    async def scenario() -> tuple[FakeApi, DashboardController]:
        api = FakeApi(pages=[progress_days(30), progress_days(30), progress_days(30)])
        controller = DashboardController(api)
        await controller.load_initial_days()
        await controller.load_more_days()
        api.gate = asyncio.Event()
        refresh = asyncio.create_task(controller.refresh_days())
        await asyncio.sleep(0)

        await controller.load_more_days()
        api.gate.set()
        await refresh
        return api, controller

    api, controller = asyncio.run(scenario())

    assert api.calls[-1] == ("list_daily_progress", 30, 0)
    assert api.count("list_daily_progress") == 3
    assert len(controller.state.days) == 30
    assert controller.state.offset == 30
    assert controller.state.loading is False


def test_load_more_failure_keeps_loaded_days() -> None:
    api = FakeApi(
        pages=[progress_days(30), ApiError(SERVER_ERROR_MESSAGE, status=500)]
    )
    controller = DashboardController(api)
    asyncio.run(controller.load_initial_days())

    asyncio.run(controller.load_more_days())

    state = controller.state
    assert len(state.days) == 30
    assert state.offset == 30
    assert state.error == SERVER_ERROR_MESSAGE
    assert state.loading is False


def test_refetch_after_meal_change_replaces_days_quietly() -> None:
    async def scenario() -> DashboardController:
        api = FakeApi(pages=[progress_days(30), progress_days(5)])
        controller = DashboardController(api)
        await controller.load_initial_days()
        api.gate = asyncio.Event()
        refetch = asyncio.create_task(controller.refetch_after_meal_change())
        await asyncio.sleep(0)

        assert controller.state.is_refetching_after_change is True
        assert controller.state.loading is False
        assert len(controller.state.days) == 30
        api.gate.set()
        await refetch
        return controller

    state = asyncio.run(scenario()).state

    assert len(state.days) == 5
    assert state.offset == 5
    assert state.has_more is False
    assert state.is_refetching_after_change is False
    assert state.loading is False
    assert state.has_more is False


def test_refetch_after_meal_change_failure_keeps_days() -> None:
    api = FakeApi(
        pages=[progress_days(30), ApiError(SERVER_ERROR_MESSAGE, status=500)]
    )
    controller = DashboardController(api)
    asyncio.run(controller.load_initial_days())

    asyncio.run(controller.refetch_after_meal_change())

    state = controller.state
    assert len(state.days) == 30
    assert state.error is None
    assert state.is_refetching_after_change is False


def test_select_day() -> None:
    controller = DashboardController(FakeApi())

    controller.select_day(date(2025, 10, 28))

    assert controller.state.selected_date == date(2025, 10, 28)


def test_closed_dashboard_ignores_late_response() -> None:
    async def scenario() -> DashboardController:
        api = FakeApi(pages=[progress_days(30)], gate=asyncio.Event())
        controller = DashboardController(api)
        task = asyncio.create_task(controller.load_initial_days())
        await asyncio.sleep(0)
        controller.close()
        api.gate.set()
        await task
        return controller

    controller = asyncio.run(scenario())

    assert controller.state.days == ()
