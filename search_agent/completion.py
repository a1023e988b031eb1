"""Single request/response calls to the LLM completion provider.

``CompletionClient.complete`` sends a transcript snapshot, optionally
advertising the registered tools, and classifies the first candidate as a
final answer, a set of tool-call requests, or an empty response. Retry and
fallback decisions belong to the agent loop; this module never retries.
"""

from __future__ import annotations

import json
import logging
import uuid
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Sequence, Union

from langchain_core.messages import BaseMessage, SystemMessage

from .constants import TOOL_CHOICE_AUTO, TOOL_USE_FAILED_CODE, TOOL_USE_FAILED_STATUS
from .conversation import ToolCallRequest
from .exceptions import ProviderError, ToolUseFailedError

if TYPE_CHECKING:  # pragma: no cover
    from langchain_core.language_models import BaseChatModel
    from langchain_core.runnables import Runnable


@dataclass(frozen=True)
class FinalAnswer:
    """The provider answered in natural language."""

    text: str


@dataclass(frozen=True)
class ToolCallsRequested:
    """The provider asked for one or more tool invocations instead of answering."""

    calls: List[ToolCallRequest] = field(default_factory=list)


@dataclass(frozen=True)
class Empty:
    """The provider returned neither content nor tool calls."""


CompletionResult = Union[FinalAnswer, ToolCallsRequested, Empty]


def translate_provider_error(exc: Exception) -> ProviderError:
    """Map a provider SDK exception onto ``ProviderError``.

    Groq (OpenAI-compatible) SDK errors expose ``status_code`` and a JSON
    ``body`` holding the error code, either at the top level or under
    ``"error"``. A 400 with code ``tool_use_failed`` becomes
    ``ToolUseFailedError``.
    """
    status = getattr(exc, "status_code", None)
    if not isinstance(status, int):
        status = None

    code: Any = None
    body = getattr(exc, "body", None)
    if isinstance(body, dict):
        error = body.get("error", body)
        if isinstance(error, dict):
            code = error.get("code")
    if code is None:
        code = getattr(exc, "code", None)
    code = code if isinstance(code, str) else None

    message = str(exc) or type(exc).__name__
    if status == TOOL_USE_FAILED_STATUS and code == TOOL_USE_FAILED_CODE:
        return ToolUseFailedError(message, status=status, code=code)
    return ProviderError(message, status=status, code=code)


def _message_text(message: BaseMessage) -> str:
    content = message.content
    if isinstance(content, str):
        return content
    parts: List[str] = []
    for block in content:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(str(block.get("text", "")))
    return "".join(parts)


def _call_id(raw_id: Any) -> str:
    # Tool results are correlated by id, so every request needs one.
    return str(raw_id) if raw_id else f"call_{uuid.uuid4().hex[:12]}"


def _extract_tool_calls(message: BaseMessage) -> List[ToolCallRequest]:
    # Raw provider tool calls keep malformed argument text verbatim.
    raw_calls = message.additional_kwargs.get("tool_calls") or []
    if raw_calls:
        requests: List[ToolCallRequest] = []
        for raw in raw_calls:
            function = raw.get("function") or {}
            requests.append(
                ToolCallRequest(
                    id=_call_id(raw.get("id")),
                    function_name=str(function.get("name") or ""),
                    arguments_json=str(function.get("arguments") or ""),
                )
            )
        return requests

    parsed = [
        ToolCallRequest(
            id=_call_id(call.get("id")),
            function_name=call["name"],
            arguments_json=json.dumps(call["args"]),
        )
        for call in getattr(message, "tool_calls", [])
    ]
    invalid = [
        ToolCallRequest(
            id=_call_id(call.get("id")),
            function_name=call.get("name") or "",
            arguments_json=call.get("args") or "",
        )
        for call in getattr(message, "invalid_tool_calls", [])
    ]
    return parsed + invalid


def parse_completion(message: BaseMessage) -> CompletionResult:
    """Classify the first candidate message returned by the provider.

    Text content wins over tool calls when both are present.
    """
    text = _message_text(message)
    if text:
        return FinalAnswer(text)
    calls = _extract_tool_calls(message)
    if calls:
        return ToolCallsRequested(calls)
    return Empty()


class CompletionClient:
    """Wraps chat-model calls with tool advertisement and result classification.

    The chat model is created lazily on the first request so a missing
    credential only surfaces when a request is actually attempted.
    """

    def __init__(
        self,
        model_factory: Callable[[], "BaseChatModel"],
        tool_schemas: Sequence[Dict[str, Any]] = (),
    ) -> None:
        self._model_factory = model_factory
        self._tool_schemas = list(tool_schemas)
        self._model: "BaseChatModel | None" = None
        self._with_tools: "Runnable | None" = None

    def _runnable(self, tools_enabled: bool) -> "Runnable":
        if self._model is None:
            self._model = self._model_factory()
        if not tools_enabled or not self._tool_schemas:
            return self._model
        if self._with_tools is None:
            self._with_tools = self._model.bind_tools(self._tool_schemas, tool_choice=TOOL_CHOICE_AUTO)
        return self._with_tools

    def complete(self, transcript: Sequence[BaseMessage], *, tools_enabled: bool) -> CompletionResult:
        """Request a completion for the transcript.

        Args:
            transcript: Full ordered transcript, starting with the system message
            tools_enabled: Advertise the registered tools (``tool_choice="auto"``);
                when False no tool schema is sent, forcing a text-only answer

        Returns:
            ``FinalAnswer``, ``ToolCallsRequested`` or ``Empty``

        Raises:
            ValueError: If the transcript is empty or does not start with the system message
            ToolUseFailedError: If the provider rejected a generated tool call
            ProviderError: For any other provider failure
        """
        if not transcript or not isinstance(transcript[0], SystemMessage):
            raise ValueError("Transcript must be non-empty and begin with the system message")

        logging.debug("Requesting completion (%d messages, tools_enabled=%s)", len(transcript), tools_enabled)
        try:
            message = self._runnable(tools_enabled).invoke(list(transcript))
        except ProviderError:
            raise
        except Exception as exc:
            raise translate_provider_error(exc) from exc

        result = parse_completion(message)
        logging.debug("Completion result: %s", type(result).__name__)
        return result

    def cancel(self) -> None:
        """Extension point for cancelling an in-flight request.

        Provider calls block until they return; there is nothing to cancel.
        """
        logging.debug("Completion cancellation requested; in-flight requests run to completion")


__all__ = [
    "CompletionClient",
    "CompletionResult",
    "Empty",
    "FinalAnswer",
    "ToolCallsRequested",
    "parse_completion",
    "translate_provider_error",
]
