"""Shared fixtures: recorded Messages API payloads and a fake Anthropic client."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

TESTDATA = Path(__file__).parent / "testdata"


class FakeEventStream:
    """Stand-in for ``anthropic.AsyncStream``: async-iterable, closable.

    Exceptions placed in *events* are raised when reached.
    """

    def __init__(self, events: list[Any]) -> None:
        self._events = list(events)
        self.closed = False

    def __aiter__(self):  # type: ignore[no-untyped-def]
        return self._iterate()

    async def _iterate(self):  # type: ignore[no-untyped-def]
        for event in self._events:
            if isinstance(event, BaseException):
                raise event
            yield event

    async def close(self) -> None:
        self.closed = True


def load_sse_events(name: str) -> list[dict[str, Any]]:
    """Parse the ``data:`` lines of a recorded SSE file into event dicts."""
    events: list[dict[str, Any]] = []
    for line in (TESTDATA / name).read_text().splitlines():
        if line.startswith("data: "):
            events.append(json.loads(line[len("data: ") :]))
    return events


@pytest.fixture
def load_json() -> Callable[[str], dict[str, Any]]:
    def _load(name: str) -> dict[str, Any]:
        result: dict[str, Any] = json.loads((TESTDATA / name).read_text())
        return result

    return _load


@pytest.fixture
def load_sse() -> Callable[[str], list[dict[str, Any]]]:
    return load_sse_events


@pytest.fixture
def make_client() -> Callable[..., MagicMock]:
    """Build a fake client whose ``messages.create`` returns *response* or streams *events*."""

    def _make(
        response: Any = None,
        events: list[Any] | None = None,
        error: BaseException | None = None,
    ) -> MagicMock:
        client = MagicMock()
        client.streams = []

        async def create(**kwargs: Any) -> Any:
            if error is not None:
                raise error
            if kwargs.get("stream"):
                stream = FakeEventStream(events or [])
                client.streams.append(stream)
                return stream
            return response

        client.messages.create = AsyncMock(side_effect=create)
        return client

    return _make
