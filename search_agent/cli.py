from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass
from typing import Any, TYPE_CHECKING, cast

from . import config as _config

if TYPE_CHECKING:  # make the AgentConfig type available to type checkers
    from .config import AgentConfig


@dataclass
class ArgSpec:
    """Specification for a command-line argument."""

    name: str
    short: str | None = None
    arg_type: type | None = None
    default_attr: str | None = None
    action: Any = None  # Can be str or argparse.BooleanOptionalAction
    choices: list[str] | None = None
    help_text: str = ""


# Argument specifications in logical groups
_ARG_SPECS: list[ArgSpec] = [
    # LLM provider
    ArgSpec(
        "--provider",
        "--p",
        default_attr="provider",
        choices=["groq", "ollama"],
        help_text="Chat completion provider (GROQ_API_KEY is read from the environment)",
    ),
    ArgSpec("--model", "--m", default_attr="model", help_text="Chat model name (default from AGENT_MODEL)"),
    ArgSpec("--ollama-base-url", "--obu", default_attr="ollama_base_url", help_text="Ollama server URL"),
    # Search backend
    ArgSpec(
        "--search-backend",
        "--sb",
        default_attr="search_backend",
        choices=["tavily", "ddgs"],
        help_text="Web search backend (TAVILY_API_KEY is read from the environment)",
    ),
    ArgSpec(
        "--search-max-results",
        "--smr",
        arg_type=int,
        default_attr="search_max_results",
        help_text="Max results to request per search",
    ),
    ArgSpec(
        "--search-display-results",
        "--sdr",
        arg_type=int,
        default_attr="search_display_results",
        help_text="Max results shown to the model per search",
    ),
    ArgSpec(
        "--search-content-chars",
        "--scc",
        arg_type=int,
        default_attr="search_content_chars",
        help_text="Characters of each result kept before truncation",
    ),
    ArgSpec(
        "--search-retries",
        "--sr",
        arg_type=int,
        default_attr="search_retries",
        help_text="Attempts per ddgs search call",
    ),
    ArgSpec(
        "--search-timeout",
        "--st",
        arg_type=float,
        default_attr="search_timeout",
        help_text="Per-request timeout (seconds) for ddgs search calls",
    ),
    # DuckDuckGo search settings
    ArgSpec("--ddg-region", "--dr", default_attr="ddg_region", help_text="DDGS region hint, e.g. us-en, uk-en, de-de"),
    ArgSpec(
        "--ddg-safesearch",
        "--dss",
        default_attr="ddg_safesearch",
        choices=["off", "moderate", "strict"],
        help_text="DDGS safesearch level",
    ),
    ArgSpec(
        "--ddg-backend",
        "--db",
        default_attr="ddg_backend",
        help_text="Comma-separated DDGS backends. Use 'auto' for provider mix or pick engines like duckduckgo, bing.",
    ),
    ArgSpec(
        "--max-concurrent-searches",
        "--mcs",
        arg_type=int,
        default_attr="max_concurrent_searches",
        help_text="Maximum tool calls of one round to run in parallel (1=sequential)",
    ),
    # Session
    ArgSpec("--exit-word", "--ew", default_attr="exit_word", help_text="Word that ends the session"),
    # Logging
    ArgSpec("--log-level", "--ll", default_attr="log_level", help_text="Logging level: DEBUG, INFO, WARNING, ERROR"),
    ArgSpec("--log-file", "--lf", default_attr="log_file", help_text="Optional log file path"),
    ArgSpec(
        "--log-console",
        "--lc",
        action=argparse.BooleanOptionalAction,
        default_attr="log_console",
        help_text="Enable console logging (pass --no-log-console to silence log statements on stderr)",
    ),
    # One-shot mode
    ArgSpec("--question", "--q", default_attr="question", help_text="Run once with this question and exit"),
]


def _add_argument_from_spec(parser: argparse.ArgumentParser, spec: ArgSpec, defaults: "AgentConfig") -> None:
    """Add a single argument to the parser from its specification.

    Args:
        parser: ArgumentParser to add to
        spec: Argument specification
        defaults: Default config to extract default value from
    """
    names = [spec.name]
    if spec.short:
        names.append(spec.short)

    kwargs: dict[str, Any] = {"help": spec.help_text}

    if spec.default_attr:
        kwargs["default"] = getattr(defaults, spec.default_attr)

    if spec.arg_type:
        kwargs["type"] = spec.arg_type

    if spec.action:
        kwargs["action"] = spec.action

    if spec.choices:
        kwargs["choices"] = spec.choices

    parser.add_argument(*names, **kwargs)


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser using data-driven specification.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(description="Conversational agent with LLM tool calling and web search")
    defaults: "AgentConfig" = cast("type[AgentConfig]", _config.AgentConfig)()

    for spec in _ARG_SPECS:
        _add_argument_from_spec(parser, spec, defaults)

    return parser


def configure_logging(level: str, log_file: str | None, log_console: bool = True, *, force: bool = True) -> None:
    level_upper = (level or "INFO").upper()
    numeric = getattr(logging, level_upper, logging.INFO)
    handlers: list[logging.Handler] = []
    if log_console:
        handlers.append(logging.StreamHandler(sys.stderr))
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    if not handlers:
        # Respect --no-log-console even without a log file by discarding logs via NullHandler
        handlers.append(logging.NullHandler())
    logging.basicConfig(
        level=numeric,
        format="%(asctime)s %(levelname)s %(message)s",
        handlers=handlers,
        force=force,
    )
    # Keep HTTP client chatter out of the operator channel unless debugging.
    if numeric > logging.DEBUG:
        for noisy in ("httpx", "httpcore", "groq"):
            logging.getLogger(noisy).setLevel(logging.WARNING)


__all__ = ["ArgSpec", "build_arg_parser", "configure_logging"]
