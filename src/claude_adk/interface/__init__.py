"""ADK model interface & Anthropic transpilation."""

from claude_adk.interface.client import DEFAULT_MODEL, ClaudeLlm, register
from claude_adk.interface.config import DEFAULT_MAX_TOKENS, ClaudeConfig
from claude_adk.interface.errors import AdapterError, ClaudeAPIError, StreamAccumulationError
from claude_adk.interface.schema import schema_to_dict
from claude_adk.interface.stream import MessageAccumulator, text_delta
from claude_adk.interface.transpiler import Transpiler
from claude_adk.interface.transpilers.anthropic import AnthropicTranspiler

__all__ = [
    "DEFAULT_MAX_TOKENS",
    "DEFAULT_MODEL",
    "AdapterError",
    "AnthropicTranspiler",
    "ClaudeAPIError",
    "ClaudeConfig",
    "ClaudeLlm",
    "MessageAccumulator",
    "StreamAccumulationError",
    "Transpiler",
    "register",
    "schema_to_dict",
    "text_delta",
]
