"""ClaudeLlm — ADK model backed by the Anthropic Messages API.

Wraps ``anthropic.AsyncAnthropic`` behind ADK's ``BaseLlm`` interface so an
ADK agent can be pointed at a Claude model::

    agent = LlmAgent(model=ClaudeLlm(model="claude-sonnet-4-5-20250929"), ...)

By default the client reads ``ANTHROPIC_API_KEY`` from the environment; pass
a :class:`ClaudeConfig` to override client options.
"""

import logging
from contextlib import aclosing
from typing import Any, AsyncGenerator

import anthropic
from google.adk.models.base_llm import BaseLlm
from google.adk.models.llm_request import LlmRequest
from google.adk.models.llm_response import LlmResponse
from google.adk.models.registry import LLMRegistry
from google.genai import types
from opentelemetry import trace
from pydantic import Field

from claude_adk.interface.config import ClaudeConfig
from claude_adk.interface.errors import ClaudeAPIError
from claude_adk.interface.stream import MessageAccumulator, text_delta
from claude_adk.interface.transpiler import Transpiler
from claude_adk.interface.transpilers.anthropic import AnthropicTranspiler, stop_to_finish
from claude_adk.utils.telemetry import (
    GENERATE_SPAN,
    get_tracer,
    record_error,
    record_request,
    record_usage,
)

logger = logging.getLogger(__name__)

_tracer = get_tracer(__name__)

DEFAULT_MODEL = "claude-sonnet-4-5-20250929"


class ClaudeLlm(BaseLlm):
    """ADK ``BaseLlm`` implementation that talks to Claude.

    ``client`` may be injected (any object exposing an async
    ``messages.create``); otherwise an ``AsyncAnthropic`` client is built
    from ``config`` on first use.
    """

    model: str = DEFAULT_MODEL
    config: ClaudeConfig = Field(default_factory=ClaudeConfig)
    client: Any = Field(default=None, exclude=True)

    @classmethod
    def supported_models(cls) -> list[str]:
        """Model name patterns this class serves in ADK's ``LLMRegistry``."""
        return [r"claude-.*"]

    @property
    def name(self) -> str:
        return self.model

    @property
    def transpiler(self) -> Transpiler:
        return AnthropicTranspiler(
            self.model,
            max_tokens=self.config.max_tokens,
            parallel_tool_use=self.config.parallel_tool_use,
        )

    @property
    def anthropic_client(self) -> Any:
        """Return the injected client, building an ``AsyncAnthropic`` if needed."""
        if self.client is None:
            self.client = anthropic.AsyncAnthropic(**self.config.client_kwargs())
        return self.client

    async def generate_content_async(
        self, llm_request: LlmRequest, stream: bool = False
    ) -> AsyncGenerator[LlmResponse, None]:
        """Generate a response for *llm_request*.

        Non-streaming mode yields exactly one response. Streaming mode yields
        one ``partial`` response per text delta, then the fully accumulated
        response with ``turn_complete`` set.

        Raises:
            ClaudeAPIError: The Messages API call failed.
            StreamAccumulationError: A streaming event could not be folded in.
        """
        transpiler = self.transpiler
        params = transpiler.to_provider(llm_request)

        span = _tracer.start_span(GENERATE_SPAN)
        record_request(
            span, model=params["model"], stream=stream, tool_count=len(params.get("tools", []))
        )
        try:
            if stream:
                async with aclosing(self._generate_stream(transpiler, params, span)) as responses:
                    async for response in responses:
                        yield response
                return

            try:
                with _in_span(span):
                    message = await self.anthropic_client.messages.create(**params)
            except anthropic.APIError as exc:
                raise _api_error(exc) from exc

            raw = _as_dict(message)
            _record_result(span, raw)
            yield transpiler.from_provider(raw)
        except Exception as exc:
            record_error(span, exc)
            raise
        finally:
            span.end()

    async def _generate_stream(
        self, transpiler: Transpiler, params: dict[str, Any], span: trace.Span
    ) -> AsyncGenerator[LlmResponse, None]:
        try:
            with _in_span(span):
                events = await self.anthropic_client.messages.create(**params, stream=True)
        except anthropic.APIError as exc:
            raise _api_error(exc) from exc

        accumulator = MessageAccumulator()
        partials = 0
        try:
            try:
                async for event in events:
                    raw_event = _as_dict(event)
                    accumulator.accumulate(raw_event)
                    delta = text_delta(raw_event)
                    if delta:
                        partials += 1
                        yield LlmResponse(
                            content=types.Content(role="model", parts=[types.Part(text=delta)]),
                            partial=True,
                        )
            except anthropic.APIError as exc:
                raise _api_error(exc, prefix="stream") from exc
        finally:
            await events.close()

        raw = accumulator.message()
        _record_result(span, raw, partials=partials)
        response = transpiler.from_provider(raw)
        response.turn_complete = True
        yield response


def register() -> None:
    """Register :class:`ClaudeLlm` with ADK so agents can name Claude models by string."""
    LLMRegistry.register(ClaudeLlm)


def _as_dict(obj: Any) -> dict[str, Any]:
    """Normalize an SDK model (or an already-plain dict) into a dict."""
    if isinstance(obj, dict):
        return obj
    result: dict[str, Any] = obj.model_dump()
    return result


def _api_error(exc: anthropic.APIError, prefix: str = "") -> ClaudeAPIError:
    detail = f"{prefix}: {exc}" if prefix else str(exc)
    return ClaudeAPIError(detail, status_code=getattr(exc, "status_code", None))


def _in_span(span: trace.Span) -> Any:
    # SDK and httpx spans nest under *span*; the caller records errors.
    return trace.use_span(span, record_exception=False, set_status_on_exception=False)


def _record_result(span: trace.Span, raw: dict[str, Any], partials: int | None = None) -> None:
    """Record stop reason and token usage from a raw Anthropic message."""
    stop_reason = raw.get("stop_reason")
    usage = raw.get("usage") or {}
    logger.debug("Claude replied: stop_reason=%s usage=%s", stop_reason, usage)
    record_usage(
        span,
        stop_reason=str(stop_reason) if stop_reason is not None else None,
        finish_reason=str(stop_to_finish(stop_reason).value),
        prompt_tokens=int(usage.get("input_tokens") or 0),
        completion_tokens=int(usage.get("output_tokens") or 0),
        partials=partials,
    )
