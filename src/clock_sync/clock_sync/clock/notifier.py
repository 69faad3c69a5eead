from __future__ import annotations

from typing import Protocol

from flask import flash

from ..core.enums import NoticeLevel
from .model import Notice


class Notifier(Protocol):
    def notify(self, level: NoticeLevel, title: str, message: str) -> None:
        raise NotImplementedError


class FlashNotifier:
    """Deliver notices as Flask flash messages (needs a request context)."""

    def notify(self, level: NoticeLevel, title: str, message: str) -> None:
        flash(f"{title}: {message}", level.value)


class RecordingNotifier:
    """Keeps notices in memory; used by scripts and tests."""

    def __init__(self):
        self.notices: list[Notice] = []

    def notify(self, level: NoticeLevel, title: str, message: str) -> None:
        self.notices.append(Notice(level=level, title=title, message=message))

    def messages(self, level: NoticeLevel | None = None) -> list[str]:
        return [n.message for n in self.notices if level is None or n.level == level]
