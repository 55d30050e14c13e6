"""Pytest fixtures and configuration for simpletodo tests."""

import random
import uuid
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from simpletodo.models.task import Task, TaskStatus
from simpletodo.services import build_services
from simpletodo.storage.data_service import DataService
from simpletodo.services.task_service import TaskService


class FakeClock:
    """Manually advanced clock returning aware UTC datetimes."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


class FakeTimer:
    """Stand-in for threading.Timer that only fires when told to."""

    instances = []

    def __init__(self, interval, function, args=None, kwargs=None):
        self.interval = interval
        self.function = function
        self.args = args or ()
        self.kwargs = kwargs or {}
        self.daemon = False
        self.started = False
        self.cancelled = False
        FakeTimer.instances.append(self)

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        return self.function(*self.args, **self.kwargs)

    @property
    def active(self) -> bool:
        return self.started and not self.cancelled


@pytest.fixture(autouse=True)
def timers():
    """Every FakeTimer created during the test, in creation order."""
    FakeTimer.instances.clear()
    yield FakeTimer.instances
    FakeTimer.instances.clear()


@pytest.fixture
def data_dir(tmp_path):
    """Fresh data directory for each test."""
    return str(tmp_path / "data")


@pytest.fixture
def data_service(data_dir):
    return DataService(data_dir)


@pytest.fixture
def task_service(data_service):
    return TaskService(data_service)


@pytest.fixture
def clock():
    """Clock starting at a fixed Wednesday noon UTC."""
    return FakeClock(datetime(2026, 1, 21, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def services(data_dir, clock):
    """Service container with a fake clock, seeded RNG and manual timers."""
    return build_services(data_dir, clock=clock, rng=random.Random(42), timer_factory=FakeTimer)


@pytest.fixture
def prompting_service(services):
    return services.prompting_service


@pytest.fixture
def make_task():
    """Factory for Task objects with sensible defaults."""

    def _make_task(text="Test task", status=TaskStatus.ACTIVE, created_at=None, completed_at=None):
        return Task(
            id=str(uuid.uuid4()),
            text=text,
            status=status,
            created_at=created_at or datetime(2026, 1, 20, 10, 0, 0, tzinfo=timezone.utc),
            completed_at=completed_at,
        )

    return _make_task


@pytest.fixture
def test_client(services):
    """FastAPI test client bound to the temp data dir. The scheduler is not started."""
    from simpletodo.api.app import create_app

    app = create_app(services=services, start_scheduler=False)
    with TestClient(app) as client:
        yield client
