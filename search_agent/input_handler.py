from __future__ import annotations

from typing import Any, Callable

from prompt_toolkit import PromptSession
from prompt_toolkit.history import InMemoryHistory

from .constants import USER_PROMPT


class InputHandler:
    """Encapsulates interactive prompt/session handling.

    Reads one line per call. On a TTY a ``prompt_toolkit`` session with
    in-memory history is used; otherwise input comes from the injected
    ``input_fn`` (tests) or the built-in ``input()``.
    """

    def __init__(
        self,
        is_tty: bool,
        prompt_session: Any | None = None,
        input_fn: Callable[[str], str] | None = None,
        prompt: str = USER_PROMPT,
    ):
        self._is_tty = bool(is_tty)
        self._prompt_session = prompt_session
        # input_fn allows injecting a non-blocking input function for tests.
        self._input_fn = input_fn
        self.prompt = prompt

    def build_prompt_session(self) -> Any:
        return PromptSession(history=InMemoryHistory(), multiline=False, wrap_lines=True)

    def ensure_prompt_session(self, existing: Any | None = None) -> Any | None:
        if existing is not None:
            return existing
        if self._prompt_session is None and self._is_tty:
            self._prompt_session = self.build_prompt_session()
        return self._prompt_session

    def read_line(self, session: Any | None = None) -> str:
        """Read one line of user text.

        Raises:
            EOFError: When input is exhausted
            KeyboardInterrupt: When the user presses Ctrl-C at the prompt
        """
        # Prefer an injected input function and avoid creating a prompt_toolkit
        # session (which would attempt to read from stdin and block in tests).
        if session is None and self._input_fn is not None:
            return self._input_fn(self.prompt)
        session = self.ensure_prompt_session(session)
        if session is None:
            return input(self.prompt)  # noqa: A001 - acceptable here
        # prompt_toolkit's prompt() can return Any; ensure we return a str for typing
        return str(session.prompt(self.prompt))


__all__ = ["InputHandler"]
