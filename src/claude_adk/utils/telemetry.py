"""Tracing for ``claude.generate`` calls.

``ClaudeLlm`` opens one span per generate call and records the request shape
and the reply's usage on it through the helpers below. Only the OpenTelemetry
API is required; until an SDK provider is installed the spans are no-ops.

``claude-adk ask --telemetry`` installs a console-exporting provider with
:func:`configure_telemetry` (needs the ``otel`` extra). Applications embedding
the adapter configure their own provider instead.
"""

from __future__ import annotations

import sys
from typing import IO

from opentelemetry import trace

GENERATE_SPAN = "claude.generate"

ATTR_MODEL = "claude_adk.model"
ATTR_STREAM = "claude_adk.stream"
ATTR_TOOL_COUNT = "claude_adk.tools"
ATTR_PARTIAL_COUNT = "claude_adk.partials"
ATTR_TOKENS_PROMPT = "claude_adk.tokens.prompt"
ATTR_TOKENS_COMPLETION = "claude_adk.tokens.completion"
ATTR_TOKENS_TOTAL = "claude_adk.tokens.total"
ATTR_FINISH_REASON = "claude_adk.finish_reason"
ATTR_STOP_REASON = "claude_adk.stop_reason"

_INSTRUMENTATION_NAME = "claude_adk"


def get_tracer(name: str | None = None) -> trace.Tracer:
    return trace.get_tracer(name or _INSTRUMENTATION_NAME)


def record_request(span: trace.Span, *, model: str, stream: bool, tool_count: int) -> None:
    """Tag a generate span with what is about to be sent."""
    span.set_attribute(ATTR_MODEL, model)
    span.set_attribute(ATTR_STREAM, stream)
    span.set_attribute(ATTR_TOOL_COUNT, tool_count)


def record_usage(
    span: trace.Span,
    *,
    stop_reason: str | None,
    finish_reason: str,
    prompt_tokens: int,
    completion_tokens: int,
    partials: int | None = None,
) -> None:
    """Tag a generate span with the outcome of the call.

    ``stop_reason`` is Claude's raw value and is skipped when absent;
    ``finish_reason`` is its normalized genai name. ``partials`` is only
    recorded for streamed calls.
    """
    if stop_reason is not None:
        span.set_attribute(ATTR_STOP_REASON, stop_reason)
    span.set_attribute(ATTR_FINISH_REASON, finish_reason)
    span.set_attribute(ATTR_TOKENS_PROMPT, prompt_tokens)
    span.set_attribute(ATTR_TOKENS_COMPLETION, completion_tokens)
    span.set_attribute(ATTR_TOKENS_TOTAL, prompt_tokens + completion_tokens)
    if partials is not None:
        span.set_attribute(ATTR_PARTIAL_COUNT, partials)


def record_error(span: trace.Span, exc: BaseException) -> None:
    span.record_exception(exc)
    span.set_status(trace.Status(trace.StatusCode.ERROR, str(exc)))


def configure_telemetry(*, service_name: str = "claude-adk", out: IO[str] | None = None) -> None:
    """Install a tracer provider that prints finished spans as JSON.

    Spans are written to *out*, stderr by default, so stdout stays reserved
    for the reply (``ask --json`` output must remain parseable).

    Raises:
        ImportError: ``opentelemetry-sdk`` is not installed.
    """
    try:
        from opentelemetry.sdk.resources import Resource  # pyright: ignore[reportMissingImports]
        from opentelemetry.sdk.trace import TracerProvider  # pyright: ignore[reportMissingImports]
        from opentelemetry.sdk.trace.export import (  # pyright: ignore[reportMissingImports]
            ConsoleSpanExporter,
            SimpleSpanProcessor,
        )
    except ImportError as exc:
        msg = "span export needs opentelemetry-sdk: pip install 'claude-adk[otel]'"
        raise ImportError(msg) from exc

    provider = TracerProvider(resource=Resource.create({"service.name": service_name}))
    exporter = ConsoleSpanExporter(out=out if out is not None else sys.stderr)
    provider.add_span_processor(SimpleSpanProcessor(exporter))
    trace.set_tracer_provider(provider)
