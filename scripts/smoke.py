from __future__ import annotations

import sys


def main() -> int:
    # Ensure project root on path if executed directly
    # (GitHub Actions runs from repo root, so this is just extra safety.)
    sys.path.insert(0, ".")

    try:
        from search_agent.cli import build_arg_parser
        from search_agent.config import SECRET_FIELDS, AgentConfig
        from search_agent.agent import Agent
        from search_agent.constants import ToolName
    except ModuleNotFoundError as e:  # pragma: no cover - CI discovery failure
        missing_root = getattr(e, "name", "").split(".")[0]
        if missing_root != "search_agent":
            raise
        print("IMPORT_FAIL:", type(e).__name__, str(e))
        return 1

    try:
        # 1) CLI defaults must equal AgentConfig defaults (single source of truth)
        parser = build_arg_parser()
        ns_defaults = vars(parser.parse_args([]))
        cfg_defaults = {k: v for k, v in AgentConfig().model_dump().items() if k not in SECRET_FIELDS}

        missing_from_cli = sorted(set(cfg_defaults) - set(ns_defaults))
        if missing_from_cli:
            print("DEFAULT_MISSING_IN_CLI:", ", ".join(missing_from_cli))
            return 1

        for k, v in cfg_defaults.items():
            if ns_defaults.get(k, object()) != v:
                print(f"DEFAULT_MISMATCH: {k}: cli={ns_defaults.get(k)} cfg={v}")
                return 1

        leaked = sorted(SECRET_FIELDS & set(ns_defaults))
        if leaked:
            print("SECRET_EXPOSED_AS_FLAG:", ", ".join(leaked))
            return 1

        # 2) Instantiate Agent without invoking the LLM or the network
        #    (the chat model and the Tavily wrapper are built lazily.)
        agent = Agent(AgentConfig(question="healthcheck"))

        # 3) Exactly one tool advertised, with the expected schema
        schemas = agent.tools.schemas()
        if [s["function"]["name"] for s in schemas] != [str(ToolName.WEB_SEARCH)]:
            print("UNEXPECTED_TOOLS:", schemas)
            return 1
        if schemas[0]["function"]["parameters"].get("required") != ["query"]:
            print("BAD_TOOL_SCHEMA:", schemas[0])
            return 1

        # 4) Empty query never reaches the provider
        if agent.search_tool.search("   ") != "Error: No search query provided":
            print("EMPTY_QUERY_NOT_REJECTED")
            return 1
    except Exception as e:  # pragma: no cover - smoke failure path
        print("SMOKE_FAIL:", type(e).__name__, str(e))
        return 1

    print("SMOKE_OK")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
