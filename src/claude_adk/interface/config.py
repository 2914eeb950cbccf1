"""Adapter configuration — client options and request defaults."""

from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, Field

DEFAULT_MAX_TOKENS = 8192


class ClaudeConfig(BaseModel):
    """Options for the Anthropic client and for request building.

    ``api_key`` may be left unset, in which case the Anthropic SDK reads
    ``ANTHROPIC_API_KEY`` from the environment.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    api_key: str | None = None
    base_url: str | None = None
    timeout: float | None = None
    max_retries: int = 2
    default_headers: dict[str, str] = Field(default_factory=lambda: dict[str, str]())
    http_client: httpx.AsyncClient | None = Field(default=None, exclude=True)
    max_tokens: int = DEFAULT_MAX_TOKENS
    parallel_tool_use: bool = False

    def client_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for ``anthropic.AsyncAnthropic``."""
        kwargs: dict[str, Any] = {"max_retries": self.max_retries}
        if self.api_key:
            kwargs["api_key"] = self.api_key
        if self.base_url:
            kwargs["base_url"] = self.base_url
        if self.timeout is not None:
            kwargs["timeout"] = self.timeout
        if self.default_headers:
            kwargs["default_headers"] = dict(self.default_headers)
        if self.http_client is not None:
            kwargs["http_client"] = self.http_client
        return kwargs
