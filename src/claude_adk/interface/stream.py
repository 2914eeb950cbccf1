"""Accumulation of Messages API streaming events into a complete message.

Streaming replies arrive as a sequence of typed events::

    message_start -> (content_block_start -> content_block_delta* ->
    content_block_stop)* -> message_delta -> message_stop

``MessageAccumulator`` folds these (as plain dicts) into a dict with the same
shape as a non-streamed ``messages.create`` reply, so a single response mapper
serves both delivery modes.
"""

import copy
import json
import logging
from typing import Any

from claude_adk.interface.errors import StreamAccumulationError

logger = logging.getLogger(__name__)

_BLOCK_EVENTS = frozenset({"content_block_start", "content_block_delta", "content_block_stop"})


class MessageAccumulator:
    """Incrementally builds a message from raw streaming events."""

    def __init__(self) -> None:
        self._message: dict[str, Any] | None = None
        self._blocks: dict[int, dict[str, Any]] = {}
        self._partial_json: dict[int, list[str]] = {}
        self.stopped = False

    @property
    def started(self) -> bool:
        return self._message is not None

    def accumulate(self, event: dict[str, Any]) -> None:
        """Fold one event into the message being built."""
        event_type = event.get("type")

        if event_type == "message_start":
            self._start(event)
            return

        if event_type in _BLOCK_EVENTS or event_type == "message_delta":
            if self._message is None:
                msg = f"{event_type} received before message_start"
                raise StreamAccumulationError(msg)

        if event_type == "content_block_start":
            index = int(event.get("index", len(self._blocks)))
            block = copy.deepcopy(event.get("content_block") or {})
            if block.get("type") == "tool_use":
                block.setdefault("input", {})
                self._partial_json[index] = []
            self._blocks[index] = block

        elif event_type == "content_block_delta":
            self._apply_delta(event)

        elif event_type == "content_block_stop":
            self._finish_block(self._block_index(event))

        elif event_type == "message_delta" and self._message is not None:
            delta = event.get("delta") or {}
            for key in ("stop_reason", "stop_sequence"):
                if delta.get(key) is not None:
                    self._message[key] = delta[key]
            # Usage in message_delta is cumulative.
            usage = event.get("usage") or {}
            message_usage = self._message.setdefault("usage", {})
            for key, value in usage.items():
                if value is not None:
                    message_usage[key] = value

        elif event_type == "message_stop":
            self.stopped = True

        else:
            # ping, and event types newer than this adapter
            logger.debug("Ignoring stream event type %r", event_type)

    def message(self) -> dict[str, Any]:
        """Return the accumulated message with content blocks in index order."""
        if self._message is None:
            msg = "stream ended before message_start"
            raise StreamAccumulationError(msg)
        for index in list(self._partial_json):
            self._finish_block(index)
        result = dict(self._message)
        result["content"] = [self._blocks[i] for i in sorted(self._blocks)]
        return result

    def _start(self, event: dict[str, Any]) -> None:
        if self._message is not None:
            msg = "duplicate message_start"
            raise StreamAccumulationError(msg)
        message = copy.deepcopy(event.get("message") or {})
        for block in message.get("content") or []:
            self._blocks[len(self._blocks)] = block
        message["content"] = []
        message.setdefault("usage", {})
        self._message = message

    def _apply_delta(self, event: dict[str, Any]) -> None:
        index = self._block_index(event)
        block = self._blocks[index]
        delta = event.get("delta") or {}
        delta_type = delta.get("type")

        if delta_type == "text_delta":
            block["text"] = block.get("text", "") + (delta.get("text") or "")
        elif delta_type == "input_json_delta":
            if index not in self._partial_json:
                msg = f"input_json_delta for non-tool block {index}"
                raise StreamAccumulationError(msg)
            self._partial_json[index].append(delta.get("partial_json") or "")
        else:
            logger.debug("Ignoring delta type %r for block %d", delta_type, index)

    def _finish_block(self, index: int) -> None:
        chunks = self._partial_json.pop(index, None)
        if chunks is None:
            return
        raw = "".join(chunks)
        if not raw:
            return
        try:
            self._blocks[index]["input"] = json.loads(raw)
        except json.JSONDecodeError as exc:
            msg = f"invalid tool input JSON for block {index}: {exc}"
            raise StreamAccumulationError(msg) from exc

    def _block_index(self, event: dict[str, Any]) -> int:
        index = event.get("index")
        if index is None or int(index) not in self._blocks:
            msg = f"{event.get('type')} for unknown content block {index}"
            raise StreamAccumulationError(msg)
        return int(index)


def text_delta(event: dict[str, Any]) -> str | None:
    """Extract text from a ``content_block_delta`` event, if it carries any."""
    if event.get("type") != "content_block_delta":
        return None
    delta = event.get("delta") or {}
    if delta.get("type") == "text_delta":
        return delta.get("text")
    return None
