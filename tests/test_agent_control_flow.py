from __future__ import annotations

import logging
from io import StringIO

from langchain_core.messages import AIMessage, HumanMessage, SystemMessage

from search_agent.agent import Agent
from search_agent.config import AgentConfig
from tests.agent_test_utils import (
    FakeAPIStatusError,
    FakeChatModel,
    FakeSearchClient,
    make_agent,
    tool_call_message,
    tool_use_failed_error,
)


def test_tool_use_failed_triggers_tool_less_fallback():
    model = FakeChatModel([tool_use_failed_error(), AIMessage(content="Fallback answer")])
    agent, out = make_agent(model)

    assert agent.answer_once("latest news?") == "Fallback answer"
    assert model.tools_enabled_history == [True, False]

    # The retried request carries the same user text and no tool schema.
    retried = model.calls[1]["messages"]
    assert [type(m) for m in retried] == [SystemMessage, HumanMessage]
    assert retried[1].content == "latest news?"
    assert agent.conversation.count("user") == 1

    text = out.getvalue()
    assert "Retrying without tool calls...\n" in text
    assert "\nAssistant: Fallback answer\n" in text


def test_fallback_failure_ends_turn_without_third_call(caplog):
    model = FakeChatModel([tool_use_failed_error(), tool_use_failed_error(), AIMessage(content="never")])
    agent, out = make_agent(model)

    with caplog.at_level(logging.ERROR):
        assert agent.answer_once("news?") is None

    assert len(model.calls) == 2
    assert "Assistant:" not in out.getvalue()
    assert any("Fallback completion failed" in r.getMessage() for r in caplog.records)


def test_fallback_empty_result_settles():
    model = FakeChatModel([tool_use_failed_error(), AIMessage(content="")])
    agent, _out = make_agent(model)
    assert agent.answer_once("news?") is None
    assert agent.conversation.count("assistant") == 0


def test_generic_provider_error_abandons_turn(caplog):
    model = FakeChatModel([FakeAPIStatusError("server error", status_code=500), AIMessage(content="late")])
    agent, out = make_agent(model)

    with caplog.at_level(logging.ERROR):
        assert agent.answer_once("hi") is None

    assert len(model.calls) == 1
    assert "Retrying without tool calls" not in out.getvalue()
    assert any(r.levelno == logging.ERROR and "server error" in r.getMessage() for r in caplog.records)


def test_tool_use_failed_on_second_pass_does_not_fall_back():
    model = FakeChatModel([tool_call_message(("c1", "webSearch", '{"query": "x"}')), tool_use_failed_error()])
    agent, out = make_agent(model)

    assert agent.answer_once("x?") is None
    assert len(model.calls) == 2
    assert "Retrying without tool calls" not in out.getvalue()


def test_exit_word_in_any_case_ends_session_without_provider_calls():
    for word in ("bye", "BYE", "Bye"):
        model = FakeChatModel([AIMessage(content="unused")])
        agent, out = make_agent(model, inputs=[word, "never read"])
        agent.run()
        assert model.calls == []
        assert out.getvalue().endswith("Goodbye!\n")


def test_custom_exit_word():
    model = FakeChatModel()
    agent, out = make_agent(model, inputs=["bye", "quit"], exit_word="quit")
    agent.run()
    assert len(model.calls) == 1
    assert "Welcome! Type 'quit' to exit." in out.getvalue()


def test_banner_and_prompt_are_printed():
    agent, out = make_agent(FakeChatModel(), inputs=["bye"])
    agent.run()
    text = out.getvalue()
    assert text.startswith("Welcome! Type 'bye' to exit.\n")
    assert "You: " in text


def test_end_of_input_ends_session():
    model = FakeChatModel()
    search = FakeSearchClient()
    agent, out = make_agent(model, search, inputs=[])
    agent.run()
    assert out.getvalue().endswith("\nGoodbye!\n")
    assert search.closed


def test_blank_lines_are_skipped():
    model = FakeChatModel()
    agent, out = make_agent(model, inputs=["", "   ", "bye"])
    agent.run()
    assert model.calls == []
    assert out.getvalue().count("You: ") == 3


def test_session_continues_after_provider_error():
    model = FakeChatModel([FakeAPIStatusError("boom", status_code=503), AIMessage(content="recovered")])
    agent, out = make_agent(model, inputs=["first", "second", "bye"])
    agent.run()

    assert len(model.calls) == 2
    assert "\nAssistant: recovered\n" in out.getvalue()
    assert out.getvalue().endswith("Goodbye!\n")


def _scripted_input(items):
    pending = list(items)

    def input_fn(prompt: str) -> str:
        if not pending:
            raise EOFError
        item = pending.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item

    return input_fn


def test_ctrl_c_at_prompt_reprompts():
    out = StringIO()
    model = FakeChatModel()
    agent = Agent(
        AgentConfig(),
        chat_model_factory=lambda: model,
        search_client=FakeSearchClient(),
        output_stream=out,
        input_fn=_scripted_input([KeyboardInterrupt(), "bye"]),
        is_tty=False,
    )
    agent.run()
    assert "Interrupted. Type 'bye' to exit." in out.getvalue()
    assert out.getvalue().endswith("Goodbye!\n")


def test_ctrl_c_during_turn_cancels_and_continues(monkeypatch):
    out = StringIO()
    model = FakeChatModel([KeyboardInterrupt(), AIMessage(content="second try")])
    agent = Agent(
        AgentConfig(),
        chat_model_factory=lambda: model,
        search_client=FakeSearchClient(),
        output_stream=out,
        input_fn=_scripted_input(["slow question", "again", "bye"]),
        is_tty=False,
    )
    cancelled = []
    monkeypatch.setattr(agent.completion_client, "cancel", lambda: cancelled.append(True))

    agent.run()

    assert cancelled == [True]
    assert "\nInterrupted.\n" in out.getvalue()
    assert "\nAssistant: second try\n" in out.getvalue()


def test_answer_once_closes_search_client_on_error():
    search = FakeSearchClient()
    model = FakeChatModel([FakeAPIStatusError("down", status_code=500)])
    agent, _out = make_agent(model, search)
    agent.answer_once("hi")
    assert search.closed
