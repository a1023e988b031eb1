"""Tests for conversation.ConversationState and tool-call records."""

from __future__ import annotations

import pytest
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage, ToolMessage

from search_agent.conversation import ConversationState, ToolCallRequest, requested_call_ids, tool_call_record
from search_agent.exceptions import TranscriptError


def _record(call_id: str, arguments: str = '{"query": "q"}') -> AIMessage:
    return tool_call_record(ToolCallRequest(id=call_id, function_name="webSearch", arguments_json=arguments))


def test_new_state_starts_with_system_message():
    state = ConversationState("be helpful")
    assert len(state) == 1
    assert isinstance(state.messages[0], SystemMessage)
    assert state.messages[0].content == "be helpful"


def test_append_and_snapshot_preserve_order():
    state = ConversationState("sys")
    state.append(HumanMessage(content="hi"))
    state.append(AIMessage(content="hello"))
    snapshot = state.snapshot()
    assert [m.content for m in snapshot] == ["sys", "hi", "hello"]


def test_snapshot_is_a_copy():
    state = ConversationState("sys")
    snapshot = state.snapshot()
    snapshot.append(HumanMessage(content="sneaky"))
    assert len(state) == 1


def test_second_system_message_rejected():
    state = ConversationState("sys")
    with pytest.raises(TranscriptError):
        state.append(SystemMessage(content="another"))


def test_pop_last_removes_user_message():
    state = ConversationState("sys")
    state.append(HumanMessage(content="hi"))
    removed = state.pop_last()
    assert removed.content == "hi"
    assert len(state) == 1


def test_pop_last_never_removes_system_message():
    state = ConversationState("sys")
    with pytest.raises(TranscriptError):
        state.pop_last()
    assert isinstance(state.last, SystemMessage)


def test_tool_message_must_follow_matching_request():
    state = ConversationState("sys")
    state.append(HumanMessage(content="hi"))
    with pytest.raises(TranscriptError):
        state.append(ToolMessage(content="orphan", tool_call_id="call_1"))


def test_tool_message_after_matching_record_is_accepted():
    state = ConversationState("sys")
    state.append(HumanMessage(content="weather?"))
    state.append(_record("call_1"))
    state.append(ToolMessage(content="sunny", tool_call_id="call_1"))
    assert state.count("tool") == 1
    assert state.count("assistant") == 1


def test_tool_message_with_wrong_id_rejected():
    state = ConversationState("sys")
    state.append(_record("call_1"))
    with pytest.raises(TranscriptError):
        state.append(ToolMessage(content="x", tool_call_id="call_2"))


def test_answered_call_cannot_be_answered_twice():
    state = ConversationState("sys")
    state.append(_record("call_1"))
    state.append(ToolMessage(content="first", tool_call_id="call_1"))
    with pytest.raises(TranscriptError):
        state.append(ToolMessage(content="second", tool_call_id="call_1"))


def test_sibling_results_for_multi_call_message():
    state = ConversationState("sys")
    multi = AIMessage(
        content="",
        tool_calls=[
            {"name": "webSearch", "args": {"query": "a"}, "id": "a1", "type": "tool_call"},
            {"name": "webSearch", "args": {"query": "b"}, "id": "b1", "type": "tool_call"},
        ],
    )
    state.append(multi)
    state.append(ToolMessage(content="A", tool_call_id="a1"))
    state.append(ToolMessage(content="B", tool_call_id="b1"))
    assert state.count("tool") == 2


def test_tool_call_record_with_valid_arguments():
    record = _record("call_9", '{"query": "weather in Paris today"}')
    assert record.content == ""
    assert record.tool_calls[0]["name"] == "webSearch"
    assert record.tool_calls[0]["args"] == {"query": "weather in Paris today"}
    assert record.tool_calls[0]["id"] == "call_9"
    assert requested_call_ids(record) == ["call_9"]


def test_tool_call_record_keeps_malformed_arguments_verbatim():
    record = _record("call_bad", "{query: oops")
    assert record.tool_calls == []
    assert record.invalid_tool_calls[0]["args"] == "{query: oops"
    assert requested_call_ids(record) == ["call_bad"]


def test_tool_call_record_non_object_arguments_are_invalid():
    record = _record("call_list", '["a", "b"]')
    assert record.tool_calls == []
    assert record.invalid_tool_calls[0]["id"] == "call_list"


def test_requested_call_ids_ignores_non_assistant_messages():
    assert requested_call_ids(HumanMessage(content="hi")) == []
