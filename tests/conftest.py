from __future__ import annotations

from datetime import datetime, timezone

import pytest

from src.clock_sync.clock_sync.clock.notifier import RecordingNotifier


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 2, 2, 8, 55, 0, tzinfo=timezone.utc)


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()
