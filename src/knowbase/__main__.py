"""Entry point: python -m knowbase <command>

- list                      Show today's list (rolls over first if due)
- add <title>               Add a todo
- done <id>                 Toggle completion
- rm <id>                   Delete a todo
- priority <id> <level>     Override priority
- rollover                  Run the day rollover now if due
- archive [from] [to]       Show archived todos (dates as YYYY-MM-DD)
"""

from __future__ import annotations

import asyncio
import logging
import sys

from knowbase.config import load_config


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _usage() -> None:
    print("Usage: python -m knowbase <command> [args]")
    print("  list                    — Show today's daily todos (default)")
    print("  add <title>             — Add a daily todo")
    print("  done <id>               — Toggle completion")
    print("  rm <id>                 — Delete a daily todo")
    print("  priority <id> <level>   — Set priority (low|medium|high|critical)")
    print("  rollover                — Run the day rollover if due")
    print("  archive [from] [to]     — Show archived todos")


def main(argv: list[str] | None = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    cmd = argv[0] if argv else "list"

    from knowbase.cli import COMMANDS

    command = COMMANDS.get(cmd)
    if command is None:
        _usage()
        return 1

    config = load_config()
    _setup_logging(config.log_level)

    from knowbase.dailytodos.engine import RolloverEngine
    from knowbase.dailytodos.errors import DailyTodoError

    try:
        engine = RolloverEngine.from_config(config)
        asyncio.run(command(engine, argv[1:]))
    except DailyTodoError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        pass
    return 0


if __name__ == "__main__":
    sys.exit(main())
