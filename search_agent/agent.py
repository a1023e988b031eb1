from __future__ import annotations

import logging
import sys
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING, Any, Callable, List, Sequence, TextIO, Tuple

from langchain_core.messages import AIMessage, HumanMessage, ToolMessage

from . import chat_models as _chat_models_mod
from . import completion as _completion_mod
from . import conversation as _conversation_mod
from . import exceptions as _exceptions
from . import input_handler as _input_handler_mod
from . import search as _search_mod
from . import search_client as _search_client_mod
from . import tools as _tools_mod
from .constants import (
    ASSISTANT_PREFIX,
    FALLBACK_NOTICE,
    GOODBYE_MESSAGE,
    INVALID_ARGUMENTS_MESSAGE,
    SEARCHING_NOTICE,
    WELCOME_BANNER,
)
from .prompts import SYSTEM_PROMPT

if TYPE_CHECKING:
    from langchain_core.language_models import BaseChatModel
    from pydantic import BaseModel

    from .config import AgentConfig
    from .conversation import ToolCallRequest
    from .protocols import SearchProvider
    from .tools import ToolSpec

# (request, tool, parsed arguments or None when they failed to parse)
PlannedCall = Tuple["ToolCallRequest", "ToolSpec", "BaseModel | None"]


class Agent:
    """Conversational agent that answers with an LLM and one round of web search.

    Each user turn runs a first completion pass with the search tool
    advertised. If the model asks for searches they are executed, recorded in
    the transcript, and a second tool-less pass produces the answer. A
    provider ``tool_use_failed`` error on the first pass triggers a single
    tool-less fallback pass instead.
    """

    def __init__(
        self,
        cfg: AgentConfig,
        *,
        chat_model_factory: Callable[[], BaseChatModel] | None = None,
        search_client: SearchProvider | None = None,
        output_stream: TextIO | None = None,
        input_fn: Callable[[str], str] | None = None,
        is_tty: bool | None = None,
    ):
        self.cfg = cfg
        self._out: TextIO = output_stream or sys.stdout
        self._is_tty: bool = bool(is_tty if is_tty is not None else getattr(self._out, "isatty", lambda: False)())

        self.search_client = search_client or _search_client_mod.build_search_client(cfg)
        self.search_tool = _search_mod.WebSearchTool.from_config(self.search_client, cfg)
        self.tools = _tools_mod.build_tool_registry(self.search_tool.search)

        factory = chat_model_factory or (lambda: _chat_models_mod.build_chat_model(cfg))
        self.completion_client = _completion_mod.CompletionClient(factory, self.tools.schemas())

        # The transcript is owned here; collaborators only receive snapshots.
        self.conversation = _conversation_mod.ConversationState(SYSTEM_PROMPT)

        self.input_handler = _input_handler_mod.InputHandler(self._is_tty, None, input_fn)

    def _write(self, text: str) -> None:
        try:
            self._out.write(text)
            if hasattr(self._out, "flush"):
                self._out.flush()
        except OSError as exc:
            # Output stream errors (IOError, BrokenPipeError are OSError subclasses in Python 3)
            logging.error("Output stream write failed: %s", exc)

    def _writeln(self, text: str = "") -> None:
        self._write(f"{text}\n")

    def _close_clients(self) -> None:
        client = getattr(self, "search_client", None)
        if client is not None:
            _search_client_mod.safe_close_client(client)

    def _is_exit(self, user_text: str) -> bool:
        return user_text.lower() == self.cfg.exit_word.lower()

    def _complete(self, *, tools_enabled: bool) -> _completion_mod.CompletionResult:
        return self.completion_client.complete(self.conversation.snapshot(), tools_enabled=tools_enabled)

    def _settle_answer(self, text: str) -> str:
        self.conversation.append(AIMessage(content=text))
        self._writeln(f"{ASSISTANT_PREFIX} {text}")
        return text

    def answer_once(self, question: str) -> str | None:
        """Process a single question and return the response.

        Args:
            question: User's question to answer.

        Returns:
            The assistant's answer, or None if the turn ended without one.
        """
        try:
            return self._handle_turn(question.strip())
        finally:
            self._close_clients()

    def run(self) -> None:
        """Start interactive conversation loop with the user.

        Reads one line per turn and processes it to completion before reading
        the next. The exit word (any letter case) or end of input ends the
        session; request failures never do.
        """
        self._writeln(WELCOME_BANNER.format(exit_word=self.cfg.exit_word))
        try:
            while True:
                try:
                    user_text = self.input_handler.read_line().strip()
                except KeyboardInterrupt:
                    self._writeln(f"\nInterrupted. Type '{self.cfg.exit_word}' to exit.")
                    continue
                except EOFError:
                    self._writeln()
                    self._writeln(GOODBYE_MESSAGE)
                    return
                if not user_text:
                    continue

                if self._is_exit(user_text):
                    self._writeln(GOODBYE_MESSAGE)
                    return

                try:
                    self._handle_turn(user_text)
                except KeyboardInterrupt:
                    self.completion_client.cancel()
                    self._writeln("\nInterrupted.")
        finally:
            self._close_clients()

    def _handle_turn(self, user_text: str) -> str | None:
        """Run one user turn through to a settled state.

        Args:
            user_text: The user's message

        Returns:
            The answer shown to the user, or None when the turn settled silently
        """
        self.conversation.append(HumanMessage(content=user_text))

        try:
            first = self._complete(tools_enabled=True)
        except _exceptions.ToolUseFailedError as exc:
            logging.error("Error: %s", exc)
            return self._fallback_pass(user_text)
        except _exceptions.ProviderError as exc:
            logging.error("Error: %s", exc)
            return None

        if isinstance(first, _completion_mod.FinalAnswer):
            return self._settle_answer(first.text)
        if isinstance(first, _completion_mod.Empty):
            logging.info("Provider returned neither content nor tool calls")
            return None

        self._run_tool_phase(first.calls)

        try:
            second = self._complete(tools_enabled=False)
        except _exceptions.ProviderError as exc:
            logging.error("Error: %s", exc)
            return None

        if isinstance(second, _completion_mod.FinalAnswer):
            return self._settle_answer(second.text)
        # One tool round per turn; further tool requests are not serviced.
        logging.info("No answer after tool round (%s); giving up on this turn", type(second).__name__)
        return None

    def _fallback_pass(self, user_text: str) -> str | None:
        """Retry the turn once without advertising tools."""
        self._writeln(FALLBACK_NOTICE)

        self.conversation.pop_last()
        self.conversation.append(HumanMessage(content=user_text))

        try:
            result = self._complete(tools_enabled=False)
        except _exceptions.ProviderError as exc:
            logging.error("Fallback completion failed: %s", exc)
            return None

        if isinstance(result, _completion_mod.FinalAnswer):
            return self._settle_answer(result.text)
        logging.info("Fallback pass produced no answer (%s)", type(result).__name__)
        return None

    def _plan_tool_calls(self, calls: Sequence[ToolCallRequest]) -> List[PlannedCall]:
        planned: List[PlannedCall] = []
        for request in calls:
            spec = self.tools.lookup(request.function_name)
            if spec is None:
                logging.warning("Ignoring call to unknown tool %r", request.function_name)
                continue
            try:
                args = spec.parse_arguments(request.arguments_json)
            except _exceptions.ArgumentParseError as exc:
                logging.error("Error parsing tool arguments: %s", exc)
                args = None
            planned.append((request, spec, args))
        return planned

    def _execute_tool_calls(self, planned: List[PlannedCall]) -> List[str]:
        """Run every parseable call and return one tool result per planned call, in order."""
        runnable: List[Tuple[Any, Any]] = [(spec, args) for _, spec, args in planned if args is not None]
        for spec, args in runnable:
            status = spec.describe(args)
            if status:
                self._writeln(status)

        workers = min(self.cfg.max_concurrent_searches, len(runnable))
        if workers > 1:
            logging.debug("Running %d tool calls with %d workers", len(runnable), workers)
            with ThreadPoolExecutor(max_workers=workers) as pool:
                outputs = list(pool.map(lambda item: item[0].run(item[1]), runnable))
        else:
            outputs = [spec.run(args) for spec, args in runnable]

        remaining = iter(outputs)
        return [next(remaining) if args is not None else INVALID_ARGUMENTS_MESSAGE for _, _, args in planned]

    def _run_tool_phase(self, calls: Sequence[ToolCallRequest]) -> None:
        self._writeln(SEARCHING_NOTICE)
        planned = self._plan_tool_calls(calls)
        results = self._execute_tool_calls(planned)

        # Each request is recorded immediately before its own result.
        for (request, _, _), content in zip(planned, results):
            self.conversation.append(_conversation_mod.tool_call_record(request))
            self.conversation.append(ToolMessage(content=content, tool_call_id=request.id))


__all__ = ["Agent"]
