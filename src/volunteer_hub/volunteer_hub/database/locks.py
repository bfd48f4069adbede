from __future__ import annotations

from contextlib import AbstractContextManager, nullcontext
from typing import Callable

from .connection import DatabaseConnection
from .mysql_base import named_lock

VolunteerLock = Callable[[int], AbstractContextManager]


def no_lock(volunteer_id: int) -> AbstractContextManager:
    return nullcontext()


class MySQLVolunteerLock:
    """Serializes read-count-then-create-penalty per volunteer across workers."""

    def __init__(self, conn_factory: DatabaseConnection, *, timeout_seconds: int = 10):
        self._conn_factory = conn_factory
        self._timeout_seconds = int(timeout_seconds)

    def __call__(self, volunteer_id: int) -> AbstractContextManager:
        return named_lock(
            self._conn_factory,
            f"volunteer_hub.volunteer.{int(volunteer_id)}",
            timeout_seconds=self._timeout_seconds,
        )
