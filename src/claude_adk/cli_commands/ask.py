"""``claude-adk ask`` — send one prompt to Claude through the ADK adapter."""

from __future__ import annotations

import asyncio
import sys

import click
from google.adk.models.llm_request import LlmRequest
from google.genai import types

from claude_adk.cli_commands._output import (
    console,
    enable_debug_logging,
    print_partial,
    print_request,
    print_response,
)
from claude_adk.interface.client import DEFAULT_MODEL, ClaudeLlm
from claude_adk.interface.errors import AdapterError


def build_request(
    prompt: str,
    *,
    system: str | None = None,
    max_tokens: int | None = None,
    temperature: float | None = None,
) -> LlmRequest:
    """Build a single-turn ADK request from CLI arguments."""
    config = types.GenerateContentConfig(
        system_instruction=system,
        max_output_tokens=max_tokens,
        temperature=temperature,
    )
    return LlmRequest(
        contents=[types.Content(role="user", parts=[types.Part(text=prompt)])],
        config=config,
    )


@click.command()
@click.argument("prompt")
@click.option(
    "--model",
    "-m",
    default=DEFAULT_MODEL,
    envvar="CLAUDE_ADK_MODEL",
    show_default=True,
    help="Claude model name.",
)
@click.option("--system", "-s", default=None, help="System instruction.")
@click.option("--stream", is_flag=True, help="Print partial text as it arrives.")
@click.option("--max-tokens", type=int, default=None, help="Maximum output tokens.")
@click.option("--temperature", type=float, default=None, help="Sampling temperature.")
@click.option("--json", "as_json", is_flag=True, help="Print the final response as JSON.")
@click.option("--dry-run", is_flag=True, help="Print the translated request, do not call the API.")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.option("--telemetry", is_flag=True, help="Print trace spans to stderr.")
def ask(
    prompt: str,
    model: str,
    system: str | None,
    stream: bool,
    max_tokens: int | None,
    temperature: float | None,
    as_json: bool,
    dry_run: bool,
    verbose: bool,
    telemetry: bool,
) -> None:
    """Send PROMPT to a Claude model and print the reply."""
    if verbose:
        enable_debug_logging()

    if telemetry:
        from claude_adk.utils.telemetry import configure_telemetry

        try:
            configure_telemetry()
        except ImportError as exc:
            console.print(f"[red]Telemetry error:[/red] {exc}")
            sys.exit(1)

    llm = ClaudeLlm(model=model)
    llm_request = build_request(
        prompt, system=system, max_tokens=max_tokens, temperature=temperature
    )

    if dry_run:
        print_request(llm.transpiler.to_provider(llm_request))
        return

    try:
        asyncio.run(_run(llm, llm_request, stream=stream, as_json=as_json))
    except AdapterError as exc:
        console.print(f"[red]Error:[/red] {exc}", markup=True, highlight=False)
        sys.exit(1)
    except Exception as exc:
        # e.g. the SDK's TypeError when no API key or auth token is configured
        console.print(f"[red]Execution error:[/red] {exc}", markup=True, highlight=False)
        sys.exit(1)


async def _run(llm: ClaudeLlm, llm_request: LlmRequest, *, stream: bool, as_json: bool) -> None:
    async for response in llm.generate_content_async(llm_request, stream=stream):
        if response.partial:
            if not as_json:
                print_partial(response)
            continue
        if stream and not as_json:
            # Partial text has already been printed.
            console.print()
        print_response(response, as_json=as_json, include_text=not stream)
