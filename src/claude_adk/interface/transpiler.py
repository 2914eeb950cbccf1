"""Transpiler protocol — converts between ADK requests/responses and a provider format.

A concrete transpiler implements bidirectional conversion: ADK
``LlmRequest`` -> provider call parameters, and provider reply ->
ADK ``LlmResponse``.
"""

from typing import Any, Protocol

from google.adk.models.llm_request import LlmRequest
from google.adk.models.llm_response import LlmResponse


class Transpiler(Protocol):
    """Protocol for provider-specific request/response transpilers."""

    def to_provider(self, llm_request: LlmRequest) -> dict[str, Any]:
        """Convert an ADK request to provider call parameters.

        Returns a dict suitable for passing as keyword arguments to the
        provider SDK's create call.
        """
        ...

    def from_provider(self, response: dict[str, Any]) -> LlmResponse:
        """Convert a provider's reply (as a plain dict) into an LlmResponse."""
        ...
