"""Provider-specific transpiler implementations."""

from claude_adk.interface.transpilers.anthropic import AnthropicTranspiler

__all__ = ["AnthropicTranspiler"]
