"""Clock and log helpers shared by the auth test modules."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

T0 = datetime(2024, 1, 1, tzinfo=UTC)


class Clock:
    """Settable UTC clock; assign ``now`` to move time in boundary tests."""

    def __init__(self, now: datetime = T0) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


def assert_not_logged(caplog: pytest.LogCaptureFixture, *secrets: str) -> None:
    """Fail if any captured record (message or traceback) contains a secret."""
    for secret in secrets:
        assert secret not in caplog.text, "credential leaked into logs"
