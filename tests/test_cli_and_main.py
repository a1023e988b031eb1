import argparse
import logging

import pytest

from search_agent import cli
from search_agent.config import SECRET_FIELDS, AgentConfig


def test_build_arg_parser_defaults_match_config():
    ns = cli.build_arg_parser().parse_args([])
    defaults = AgentConfig().model_dump()
    for key, value in vars(ns).items():
        assert defaults[key] == value, key


def test_build_arg_parser_flags_and_short_aliases():
    parser = cli.build_arg_parser()
    ns = parser.parse_args(
        ["--provider", "ollama", "--m", "qwen3", "--smr", "8", "--sb", "ddgs", "--no-log-console", "--q", "hi"]
    )
    assert ns.provider == "ollama"
    assert ns.model == "qwen3"
    assert ns.search_max_results == 8
    assert ns.search_backend == "ddgs"
    assert ns.log_console is False
    assert ns.question == "hi"


def test_build_arg_parser_rejects_unknown_provider():
    with pytest.raises(SystemExit):
        cli.build_arg_parser().parse_args(["--provider", "openai"])


def test_secrets_are_not_flags():
    ns = cli.build_arg_parser().parse_args([])
    assert not SECRET_FIELDS & set(vars(ns))


def test_configure_logging_nullhandler_when_no_console_or_file():
    cli.configure_logging("info", None, False, force=True)
    handlers = logging.getLogger().handlers
    assert handlers, "Handlers should be installed even when console and file are disabled"
    assert not any(isinstance(h, logging.StreamHandler) for h in handlers)


def test_configure_logging_quiets_http_clients_unless_debug():
    cli.configure_logging("warning", None, False, force=True)
    assert logging.getLogger("httpx").level == logging.WARNING
    assert logging.getLogger().level == logging.WARNING


def test_configure_logging_writes_file(tmp_path):
    log_path = tmp_path / "agent.log"
    cli.configure_logging("INFO", str(log_path), False, force=True)
    logging.info("hello from test")
    for handler in logging.getLogger().handlers:
        handler.flush()
    assert "INFO hello from test" in log_path.read_text()
    cli.configure_logging("WARNING", None, False, force=True)


def _namespace(**overrides):
    values = dict(log_level="WARNING", log_file=None, log_console=False, question=None)
    values.update(overrides)
    return argparse.Namespace(**values)


class _FakeAgent:
    instances: list = []

    def __init__(self, cfg):
        self.cfg = cfg
        self.asked = None
        self.ran = False
        _FakeAgent.instances.append(self)

    def answer_once(self, q):
        self.asked = q

    def run(self):
        self.ran = True


def test_main_calls_answer_once_when_question(monkeypatch):
    import search_agent.main as main_mod

    _FakeAgent.instances = []
    monkeypatch.setattr(main_mod, "Agent", _FakeAgent)
    main_mod.main(_namespace(question=" hello "))
    agent = _FakeAgent.instances[0]
    assert agent.asked == "hello"
    assert agent.ran is False
    assert agent.cfg.question == " hello "


def test_main_runs_interactive_session_without_question(monkeypatch):
    import search_agent.main as main_mod

    _FakeAgent.instances = []
    monkeypatch.setattr(main_mod, "Agent", _FakeAgent)
    main_mod.main(_namespace())
    assert _FakeAgent.instances[0].ran is True


def test_main_exits_with_code_2_on_invalid_config(monkeypatch, capsys):
    import search_agent.main as main_mod

    monkeypatch.setattr(main_mod, "Agent", _FakeAgent)
    with pytest.raises(SystemExit) as info:
        main_mod.main(_namespace(search_max_results=2, search_display_results=3))
    assert info.value.code == 2
    assert "Configuration error" in capsys.readouterr().err
