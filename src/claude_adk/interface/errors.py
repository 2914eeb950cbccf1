"""Shared error types for the adapter layer."""


class AdapterError(Exception):
    """Base error for all adapter failures."""


class ClaudeAPIError(AdapterError):
    """The Anthropic Messages API call failed."""

    def __init__(self, detail: str = "", status_code: int | None = None) -> None:
        self.detail = detail
        self.status_code = status_code
        super().__init__("claude" + (f": {detail}" if detail else ""))


class StreamAccumulationError(AdapterError):
    """A streaming event could not be folded into the accumulated message."""

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__("claude: accumulate" + (f": {detail}" if detail else ""))
