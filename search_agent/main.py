from __future__ import annotations

import argparse
import logging
import sys

from .agent import Agent
from .cli import build_arg_parser, configure_logging
from .config import AgentConfig
from .exceptions import ConfigurationError


def main(args: argparse.Namespace | None = None) -> None:
    if args is None:
        parser = build_arg_parser()
        args = parser.parse_args()
    configure_logging(args.log_level, args.log_file, args.log_console)
    logger = logging.getLogger(__name__)

    try:
        cfg = AgentConfig(**vars(args))
    except ConfigurationError as e:
        logger.error("Invalid configuration: %s", e)
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(2)

    agent = Agent(cfg)
    if args.question:
        agent.answer_once(args.question.strip())
    else:
        agent.run()


if __name__ == "__main__":
    main()
