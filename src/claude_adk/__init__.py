"""claude-adk — run Google ADK agents on Anthropic Claude models."""

from __future__ import annotations

from typing import TYPE_CHECKING

__version__ = "0.1.0"

if TYPE_CHECKING:
    from claude_adk.interface.client import ClaudeLlm as ClaudeLlm
    from claude_adk.interface.client import register as register
    from claude_adk.interface.config import ClaudeConfig as ClaudeConfig

_LAZY_EXPORTS = {
    "ClaudeLlm": "claude_adk.interface.client",
    "register": "claude_adk.interface.client",
    "ClaudeConfig": "claude_adk.interface.config",
}


def __getattr__(name: str) -> object:
    module_path = _LAZY_EXPORTS.get(name)
    if module_path is not None:
        import importlib

        mod = importlib.import_module(module_path)
        return getattr(mod, name)
    raise AttributeError(f"module 'claude_adk' has no attribute {name!r}")
