"""Anthropic transpiler — maps ADK/genai requests onto the Messages API and back.

Key differences from the genai conversation model:
- System instruction is a separate top-level ``system`` parameter.
- Role "model" becomes "assistant"; every other role becomes "user".
- Messages must strictly alternate between user and assistant roles, so
  consecutive same-role messages are merged.
- Function calls become ``tool_use`` blocks and function responses become
  ``tool_result`` blocks inside user messages.
- ``max_tokens`` is mandatory on every request.
"""

import base64
import json
import logging
from typing import Any

from google.adk.models.llm_request import LlmRequest
from google.adk.models.llm_response import LlmResponse
from google.genai import types

from claude_adk.interface.config import DEFAULT_MAX_TOKENS
from claude_adk.interface.schema import schema_to_dict

logger = logging.getLogger(__name__)

_ASSISTANT_ROLES = frozenset({"model", "assistant"})
_DOCUMENT_MIME_TYPES = frozenset({"application/pdf"})

_FINISH_REASONS: dict[str, types.FinishReason] = {
    "end_turn": types.FinishReason.STOP,
    "max_tokens": types.FinishReason.MAX_TOKENS,
    "tool_use": types.FinishReason.STOP,
}


class AnthropicTranspiler:
    """Converts between ADK requests/responses and Anthropic's Messages API format."""

    def __init__(
        self,
        model: str,
        *,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        parallel_tool_use: bool = False,
    ) -> None:
        self.model = model
        self.max_tokens = max_tokens
        self.parallel_tool_use = parallel_tool_use

    # ------------------------------------------------------------------
    # Request mapping
    # ------------------------------------------------------------------

    def to_provider(self, llm_request: LlmRequest) -> dict[str, Any]:
        """Convert an ADK request into ``messages.create`` keyword arguments."""
        _log_contents(llm_request.contents)

        params: dict[str, Any] = {
            "model": llm_request.model or self.model,
            "max_tokens": self.max_tokens,
            "messages": contents_to_messages(llm_request.contents),
        }

        config = llm_request.config
        if config is None:
            return params

        if config.system_instruction is not None:
            system = system_from_content(config.system_instruction)
            if system:
                params["system"] = system
        if config.max_output_tokens and config.max_output_tokens > 0:
            params["max_tokens"] = config.max_output_tokens
        if config.temperature is not None:
            params["temperature"] = config.temperature
        if config.top_p is not None:
            params["top_p"] = config.top_p
        if config.top_k is not None:
            params["top_k"] = int(config.top_k)
        if config.stop_sequences:
            params["stop_sequences"] = list(config.stop_sequences)

        tools = self._extract_tools(config.tools)
        if tools:
            params["tools"] = tools
            params["tool_choice"] = self._tool_choice(config.tool_config)

        return params

    def _extract_tools(self, tools: list[Any] | None) -> list[dict[str, Any]]:
        """Flatten every function declaration into an Anthropic tool definition."""
        result: list[dict[str, Any]] = []
        for tool in tools or []:
            # Callables and MCP sessions are resolved by ADK before they reach us.
            declarations = getattr(tool, "function_declarations", None) or []
            for decl in declarations:
                result.append(
                    {
                        "name": decl.name,
                        "description": decl.description or "",
                        "input_schema": _input_schema(decl),
                    }
                )
        return result

    def _tool_choice(self, tool_config: types.ToolConfig | None) -> dict[str, Any]:
        calling = tool_config.function_calling_config if tool_config else None
        mode = calling.mode if calling else None

        if mode == types.FunctionCallingConfigMode.NONE:
            return {"type": "none"}

        choice: dict[str, Any] = {"type": "auto"}
        if mode == types.FunctionCallingConfigMode.ANY:
            names = (calling.allowed_function_names if calling else None) or []
            if len(names) == 1:
                choice = {"type": "tool", "name": names[0]}
            else:
                choice = {"type": "any"}

        if not self.parallel_tool_use:
            choice["disable_parallel_tool_use"] = True
        return choice

    # ------------------------------------------------------------------
    # Response mapping
    # ------------------------------------------------------------------

    def from_provider(self, response: dict[str, Any]) -> LlmResponse:
        """Convert an Anthropic message (as a dict) into an LlmResponse."""
        blocks: list[dict[str, Any]] = response.get("content") or []
        stop_reason = response.get("stop_reason")
        logger.debug(
            "from_provider: stop_reason=%s, content blocks=%d", stop_reason, len(blocks)
        )

        parts: list[types.Part] = []
        for i, block in enumerate(blocks):
            block_type = block.get("type")
            logger.debug("  block[%d]: type=%s", i, block_type)
            if block_type == "text":
                parts.append(types.Part(text=block.get("text", "")))
            elif block_type == "tool_use":
                parts.append(
                    types.Part(
                        function_call=types.FunctionCall(
                            id=block.get("id"),
                            name=block.get("name"),
                            args=block.get("input") or {},
                        )
                    )
                )

        return LlmResponse(
            content=types.Content(role="model", parts=parts),
            finish_reason=stop_to_finish(stop_reason),
            usage_metadata=usage_to_metadata(response.get("usage")),
        )


# ---------------------------------------------------------------------------
# Request helpers
# ---------------------------------------------------------------------------


def system_from_content(instruction: Any) -> list[dict[str, Any]]:
    """Collapse a system instruction into at most one Anthropic text block.

    Accepts anything genai allows for ``system_instruction``: a string, a
    Part, a Content, or a list of strings/Parts. Texts are joined by newlines.
    """
    texts = [text for text in _instruction_texts(instruction) if text]
    if not texts:
        return []
    return [{"type": "text", "text": "\n".join(texts)}]


def _instruction_texts(instruction: Any) -> list[str]:
    if isinstance(instruction, str):
        return [instruction]
    if isinstance(instruction, types.Content):
        return [part.text or "" for part in instruction.parts or []]
    if isinstance(instruction, types.Part):
        return [instruction.text or ""]
    if isinstance(instruction, list):
        texts: list[str] = []
        for item in instruction:
            texts.extend(_instruction_texts(item))
        return texts
    return []


def contents_to_messages(contents: list[types.Content] | None) -> list[dict[str, Any]]:
    """Convert genai contents into alternating Anthropic messages."""
    messages: list[dict[str, Any]] = []
    for content in contents or []:
        if content is None:
            continue
        blocks = parts_to_blocks(content.parts)
        if not blocks:
            continue
        role = "assistant" if content.role in _ASSISTANT_ROLES else "user"
        messages.append({"role": role, "content": blocks})
    return _merge_consecutive_roles(messages)


def parts_to_blocks(parts: list[types.Part] | None) -> list[dict[str, Any]]:
    """Convert genai parts into Anthropic content blocks.

    Thought parts and parts with no Anthropic counterpart are dropped.
    """
    blocks: list[dict[str, Any]] = []
    for part in parts or []:
        if part.thought:
            continue
        if part.text:
            blocks.append({"type": "text", "text": part.text})
        elif part.function_call is not None:
            call = part.function_call
            blocks.append(
                {
                    "type": "tool_use",
                    "id": call.id,
                    "name": call.name,
                    "input": call.args or {},
                }
            )
        elif part.function_response is not None:
            resp = part.function_response
            content = json.dumps(resp.response, default=str)
            logger.debug(
                "FunctionResponse ID: %r, Name: %r, Content: %s", resp.id, resp.name, content
            )
            blocks.append(
                {
                    "type": "tool_result",
                    "tool_use_id": resp.id,
                    "content": content,
                    "is_error": False,
                }
            )
        elif part.inline_data is not None and part.inline_data.data:
            block = _inline_data_block(part.inline_data)
            if block is not None:
                blocks.append(block)
    return blocks


def _inline_data_block(blob: types.Blob) -> dict[str, Any] | None:
    mime_type = blob.mime_type or ""
    if mime_type.startswith("image/"):
        block_type = "image"
    elif mime_type in _DOCUMENT_MIME_TYPES:
        block_type = "document"
    else:
        logger.debug("Dropping inline data with unsupported mime type %r", mime_type)
        return None
    return {
        "type": block_type,
        "source": {
            "type": "base64",
            "media_type": mime_type,
            "data": base64.b64encode(blob.data or b"").decode("ascii"),
        },
    }


def _input_schema(decl: types.FunctionDeclaration) -> dict[str, Any]:
    """Build an Anthropic ``input_schema`` from a function declaration."""
    input_schema: dict[str, Any] = {"type": "object"}

    schema: dict[str, Any] | None = None
    if decl.parameters is not None:
        schema = schema_to_dict(decl.parameters)
    elif decl.parameters_json_schema is not None:
        raw = decl.parameters_json_schema
        if hasattr(raw, "model_dump"):
            raw = raw.model_dump(exclude_none=True)
        logger.debug("parameters_json_schema for %r: %s", decl.name, raw)
        if isinstance(raw, dict):
            schema = raw

    if schema is None:
        return input_schema
    if "properties" in schema:
        input_schema["properties"] = schema["properties"]
    required = schema.get("required")
    if isinstance(required, list):
        input_schema["required"] = [name for name in required if isinstance(name, str)]
    return input_schema


def _merge_consecutive_roles(
    messages: list[dict[str, Any]],
) -> list[dict[str, Any]]:
    """Merge consecutive messages with the same role.

    Anthropic requires strict user/assistant alternation; a function
    response followed by a user text, for example, shares one user turn.
    Within a merged user turn ``tool_result`` blocks must come first.
    """
    merged: list[dict[str, Any]] = []
    for msg in messages:
        if merged and merged[-1]["role"] == msg["role"]:
            blocks = merged[-1]["content"] + msg["content"]
            if msg["role"] == "user":
                blocks = _tool_results_first(blocks)
            merged[-1]["content"] = blocks
        else:
            merged.append(msg)
    return merged


def _tool_results_first(blocks: list[dict[str, Any]]) -> list[dict[str, Any]]:
    results = [block for block in blocks if block.get("type") == "tool_result"]
    others = [block for block in blocks if block.get("type") != "tool_result"]
    return results + others


def _log_contents(contents: list[types.Content] | None) -> None:
    if not logger.isEnabledFor(logging.DEBUG):
        return
    contents = contents or []
    logger.debug("to_provider called with %d content(s)", len(contents))
    for i, content in enumerate(contents):
        if content is None:
            continue
        parts = content.parts or []
        logger.debug("  content[%d] role=%s parts=%d", i, content.role, len(parts))
        for j, part in enumerate(parts):
            logger.debug(
                "    part[%d]: text=%r has_function_call=%s has_function_response=%s",
                j,
                part.text,
                part.function_call is not None,
                part.function_response is not None,
            )


# ---------------------------------------------------------------------------
# Response helpers
# ---------------------------------------------------------------------------


def stop_to_finish(stop_reason: str | None) -> types.FinishReason:
    """Normalize an Anthropic stop reason into a genai finish reason."""
    if stop_reason is None:
        return types.FinishReason.OTHER
    return _FINISH_REASONS.get(stop_reason, types.FinishReason.OTHER)


def usage_to_metadata(
    usage: dict[str, Any] | None,
) -> types.GenerateContentResponseUsageMetadata:
    """Convert Anthropic token usage into genai usage metadata."""
    usage = usage or {}
    input_tokens = int(usage.get("input_tokens") or 0)
    output_tokens = int(usage.get("output_tokens") or 0)
    fields: dict[str, Any] = {
        "prompt_token_count": input_tokens,
        "candidates_token_count": output_tokens,
        "total_token_count": input_tokens + output_tokens,
    }
    cache_read = usage.get("cache_read_input_tokens")
    if cache_read is not None:
        fields["cached_content_token_count"] = int(cache_read)
    return types.GenerateContentResponseUsageMetadata(**fields)
