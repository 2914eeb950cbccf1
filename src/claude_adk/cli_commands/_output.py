"""Shared CLI output formatters."""

from __future__ import annotations

import logging
from typing import Any

from google.adk.models.llm_response import LlmResponse  # noqa: TC002
from rich.console import Console
from rich.logging import RichHandler

console = Console()
err_console = Console(stderr=True)


def enable_debug_logging() -> None:
    """Route DEBUG logging (request/response shapes) to stderr."""
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def print_request(params: dict[str, Any]) -> None:
    """Pretty-print translated Messages API parameters."""
    console.print_json(data=params)


def print_partial(response: LlmResponse) -> None:
    """Print the text of a partial response without a trailing newline."""
    console.print(_response_text(response), end="", markup=False, highlight=False)


def print_response(
    response: LlmResponse, *, as_json: bool = False, include_text: bool = True
) -> None:
    """Print a final response as text (plus tool calls and usage) or JSON."""
    if as_json:
        console.print_json(response.model_dump_json(exclude_none=True))
        return

    text = _response_text(response) if include_text else ""
    if text:
        console.print(text, markup=False, highlight=False)
    for call in _function_calls(response):
        console.print(f"[cyan]tool call[/cyan] {call}", highlight=False)
    _print_usage(response)


def _print_usage(response: LlmResponse) -> None:
    usage = response.usage_metadata
    if usage is None:
        return
    finish = response.finish_reason.value if response.finish_reason else "-"
    err_console.print(
        f"[dim]finish={finish} prompt={usage.prompt_token_count or 0} "
        f"completion={usage.candidates_token_count or 0} "
        f"total={usage.total_token_count or 0}[/dim]"
    )


def _response_text(response: LlmResponse) -> str:
    if response.content is None:
        return ""
    return "".join(part.text or "" for part in response.content.parts or [])


def _function_calls(response: LlmResponse) -> list[str]:
    if response.content is None:
        return []
    return [
        f"{part.function_call.name}({part.function_call.args or {}})"
        for part in response.content.parts or []
        if part.function_call is not None
    ]
