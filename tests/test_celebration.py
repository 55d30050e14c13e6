"""Tests for celebration message rotation."""

import random
from datetime import datetime, timedelta, timezone

import pytest

from simpletodo.models.task import TaskStatus
from simpletodo.services.celebration_service import (
    DATA_DRIVEN_FALLBACK,
    MESSAGE_POOL,
    CelebrationService,
    start_of_week,
)


class TestMessagePool:
    """Test the message pool itself."""

    def test_pool_covers_all_variants(self):
        variants = {m.variant for m in MESSAGE_POOL}
        assert variants == {"enthusiastic", "supportive", "motivational", "data-driven"}
        assert len(MESSAGE_POOL) == 11


class TestRotation:
    """Test repetition avoidance."""

    def test_no_repeat_within_five(self):
        service = CelebrationService(rng=random.Random(7))
        seen = [service.get_celebration_message().message for _ in range(40)]
        for i in range(len(seen)):
            window = seen[max(0, i - 5):i]
            assert seen[i] not in window

    def test_falls_back_to_full_pool(self):
        """Test selection still works when every message is recent."""
        service = CelebrationService(rng=random.Random(1))
        service.message_pool = service.message_pool[:2]
        messages = {service.get_celebration_message().message for _ in range(6)}
        assert messages <= {m.message for m in MESSAGE_POOL[:2]}


class TestDataDriven:
    """Test the weekly count message."""

    @staticmethod
    def _data_driven_only(service):
        service.message_pool = [m for m in MESSAGE_POOL if m.variant == "data-driven"]
        return service

    def test_without_task_service_uses_fallback(self):
        service = self._data_driven_only(CelebrationService())
        message = service.get_celebration_message()
        assert message.message == DATA_DRIVEN_FALLBACK
        assert message.variant == "data-driven"

    def test_counts_tasks_completed_this_week(self, task_service):
        for text in ("One", "Two"):
            task = task_service.create_task(text)
            task_service.complete_task(task.id)
        task_service.create_task("Still active")

        service = self._data_driven_only(CelebrationService(task_service))
        assert service.get_celebration_message().message == "Task completed! That's 2 this week!"

    def test_task_service_error_uses_fallback(self, task_service, monkeypatch):
        def broken(*args, **kwargs):
            raise RuntimeError("boom")

        monkeypatch.setattr(task_service, "get_all_tasks", broken)
        service = self._data_driven_only(CelebrationService(task_service))
        assert service.get_celebration_message().message == DATA_DRIVEN_FALLBACK

    def test_tasks_before_week_start_not_counted(self, data_service, task_service, make_task):
        now = datetime.now(timezone.utc)
        old = make_task(
            "Last month",
            status=TaskStatus.COMPLETED,
            created_at=now - timedelta(days=40),
            completed_at=now - timedelta(days=30),
        )
        data_service.save_tasks([old])

        service = CelebrationService(task_service)
        assert service.get_completed_tasks_this_week() == 0


class TestStartOfWeek:
    """Test week boundaries."""

    @pytest.mark.parametrize("day_offset", range(7))
    def test_start_is_sunday_midnight(self, day_offset):
        now = datetime(2026, 1, 18, 15, 30, tzinfo=timezone.utc) + timedelta(days=day_offset)
        start = start_of_week(now)
        assert start.weekday() == 6
        assert (start.hour, start.minute, start.second) == (0, 0, 0)
        assert start <= now
        assert now - start < timedelta(days=7)
