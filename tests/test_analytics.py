"""Tests for AnalyticsService."""

from datetime import datetime, timedelta, timezone

import pytest

from simpletodo.models.prompt import PromptEvent, PromptResponse
from simpletodo.models.task import TaskStatus
from simpletodo.services.analytics_service import AnalyticsService

BASE = datetime(2026, 1, 20, 9, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def analytics_service(task_service, data_service):
    return AnalyticsService(task_service, data_service)


def _event(response, response_ms=None):
    responded_at = BASE + timedelta(milliseconds=response_ms) if response_ms is not None else None
    return PromptEvent(
        prompt_id=f"prompt-{response}-{response_ms}",
        task_id="task-1",
        prompted_at=BASE,
        response=response,
        responded_at=responded_at,
    )


class TestTaskAnalytics:
    """Test task statistics."""

    def test_empty(self, analytics_service):
        assert analytics_service.get_completion_rate() == 0
        assert analytics_service.get_average_task_lifetime() is None
        assert analytics_service.get_task_count_by_status() == {"active": 0, "completed": 0}
        assert analytics_service.get_oldest_active_task() is None

    def test_completion_rate(self, analytics_service, data_service, make_task):
        data_service.save_tasks([
            make_task("a", status=TaskStatus.COMPLETED, completed_at=BASE + timedelta(hours=1)),
            make_task("b"),
            make_task("c"),
            make_task("d"),
        ])
        assert analytics_service.get_completion_rate() == 25
        assert analytics_service.get_task_count_by_status() == {"active": 3, "completed": 1}

    def test_average_lifetime(self, analytics_service, data_service, make_task):
        """Test lifetimes are averaged in milliseconds over completed tasks only."""
        data_service.save_tasks([
            make_task("1h", status=TaskStatus.COMPLETED, created_at=BASE, completed_at=BASE + timedelta(hours=1)),
            make_task("3h", status=TaskStatus.COMPLETED, created_at=BASE, completed_at=BASE + timedelta(hours=3)),
            make_task("active", created_at=BASE),
        ])
        assert analytics_service.get_average_task_lifetime() == 2 * 60 * 60 * 1000

    def test_oldest_active_task(self, analytics_service, data_service, make_task):
        data_service.save_tasks([
            make_task("newer", created_at=BASE),
            make_task("oldest", created_at=BASE - timedelta(days=3)),
            make_task(
                "completed older",
                status=TaskStatus.COMPLETED,
                created_at=BASE - timedelta(days=10),
                completed_at=BASE,
            ),
        ])
        assert analytics_service.get_oldest_active_task().text == "oldest"


class TestPromptAnalytics:
    """Test prompt response statistics."""

    def test_empty(self, analytics_service):
        assert analytics_service.get_prompt_response_rate() == 0
        assert analytics_service.get_prompt_response_breakdown() == {
            "complete": 0,
            "dismiss": 0,
            "snooze": 0,
            "timeout": 0,
        }
        assert analytics_service.get_average_response_time() == 0

    def test_response_rate_and_breakdown(self, analytics_service, data_service):
        data_service.save_prompt_events([
            _event(PromptResponse.COMPLETE, 1000),
            _event(PromptResponse.DISMISS, 3000),
            _event(PromptResponse.SNOOZE, 5000),
            _event(PromptResponse.TIMEOUT),
        ])
        assert analytics_service.get_prompt_response_rate() == 75
        assert analytics_service.get_prompt_response_breakdown() == {
            "complete": 1,
            "dismiss": 1,
            "snooze": 1,
            "timeout": 1,
        }

    def test_average_response_time_ignores_timeouts(self, analytics_service, data_service):
        data_service.save_prompt_events([
            _event(PromptResponse.COMPLETE, 2000),
            _event(PromptResponse.DISMISS, 4000),
            _event(PromptResponse.TIMEOUT),
        ])
        assert analytics_service.get_average_response_time() == 3000
