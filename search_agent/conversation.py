"""Conversation transcript management for the web search agent.

The transcript is the ordered message history sent to the LLM provider on
every request. It is owned by the agent loop; the completion client and tool
executor only ever see snapshots of it.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Iterator, List, Literal, Sequence

from langchain_core.messages import (
    AIMessage,
    BaseMessage,
    HumanMessage,
    SystemMessage,
    ToolMessage,
)
from langchain_core.messages.tool import invalid_tool_call, tool_call

from .exceptions import TranscriptError

Role = Literal["system", "user", "assistant", "tool"]

_ROLE_TYPES: dict[str, type[BaseMessage]] = {
    "system": SystemMessage,
    "user": HumanMessage,
    "assistant": AIMessage,
    "tool": ToolMessage,
}


@dataclass(frozen=True)
class ToolCallRequest:
    """A tool invocation requested by the model.

    ``arguments_json`` is the raw argument text exactly as the provider sent
    it; it is not guaranteed to be well-formed.
    """

    id: str
    function_name: str
    arguments_json: str


def requested_call_ids(message: BaseMessage) -> List[str]:
    """Return the tool-call ids carried by an assistant message, in order."""
    if not isinstance(message, AIMessage):
        return []
    ids = [call.get("id") for call in message.tool_calls]
    ids.extend(call.get("id") for call in message.invalid_tool_calls)
    return [call_id for call_id in ids if call_id]


def tool_call_record(request: ToolCallRequest) -> AIMessage:
    """Build the assistant message that records a single tool-call request.

    The content is empty (sent as null by the provider adapters). Arguments
    that do not decode to a JSON object are kept verbatim as an invalid tool
    call so the transcript still shows what the model asked for.
    """
    try:
        args = json.loads(request.arguments_json)
    except (TypeError, ValueError) as exc:
        args = None
        error = f"Malformed arguments: {exc}"
    else:
        error = "Arguments must be a JSON object"

    if isinstance(args, dict):
        return AIMessage(
            content="",
            tool_calls=[tool_call(name=request.function_name, args=args, id=request.id)],
        )
    return AIMessage(
        content="",
        invalid_tool_calls=[
            invalid_tool_call(
                name=request.function_name,
                args=request.arguments_json,
                id=request.id,
                error=error,
            )
        ],
    )


class ConversationState:
    """Append-only transcript whose first entry is the fixed system instruction.

    Features:
    - Snapshots for completion requests
    - Tool results validated against pending tool-call requests
    - A single ``pop_last`` used by the tool-less fallback pass

    Mutation is exclusively owned by the agent loop. Collaborators propose
    messages by returning them; they never write here directly.
    """

    def __init__(self, system_prompt: str) -> None:
        self._messages: List[BaseMessage] = [SystemMessage(content=system_prompt)]

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[BaseMessage]:
        return iter(tuple(self._messages))

    @property
    def messages(self) -> Sequence[BaseMessage]:
        return tuple(self._messages)

    @property
    def last(self) -> BaseMessage:
        return self._messages[-1]

    def snapshot(self) -> List[BaseMessage]:
        """Return the full ordered transcript for a completion request."""
        return list(self._messages)

    def count(self, role: Role) -> int:
        """Count messages of a given transcript role."""
        message_type = _ROLE_TYPES[role]
        return sum(1 for message in self._messages if isinstance(message, message_type))

    def append(self, message: BaseMessage) -> None:
        """Add a message to the end of the transcript.

        Args:
            message: Message to append

        Raises:
            TranscriptError: If the message is a second system instruction or a
                tool result with no matching pending request
        """
        if isinstance(message, SystemMessage):
            raise TranscriptError("The system instruction is fixed; cannot append another system message")
        if isinstance(message, ToolMessage):
            self._check_tool_result(message)
        self._messages.append(message)

    def pop_last(self) -> BaseMessage:
        """Remove and return the last message.

        Raises:
            TranscriptError: If only the system instruction remains
        """
        if len(self._messages) <= 1:
            raise TranscriptError("The system instruction cannot be removed")
        removed = self._messages.pop()
        logging.debug("Removed last %s message from transcript", removed.type)
        return removed

    def _check_tool_result(self, message: ToolMessage) -> None:
        # Walk back over sibling tool results to the requesting assistant message.
        answered: set[str] = set()
        index = len(self._messages) - 1
        while index > 0 and isinstance(self._messages[index], ToolMessage):
            answered.add(self._messages[index].tool_call_id)  # type: ignore[attr-defined]
            index -= 1

        pending = set(requested_call_ids(self._messages[index])) - answered
        if message.tool_call_id not in pending:
            raise TranscriptError(f"Tool result {message.tool_call_id!r} does not answer a pending tool call")


__all__ = [
    "ConversationState",
    "Role",
    "ToolCallRequest",
    "requested_call_ids",
    "tool_call_record",
]
