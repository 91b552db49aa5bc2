"""Entry point: python -m membank [chat|run "<text>"]

- No args / "chat": Interactive CLI REPL
- "run <text>":     Handle a single command line and print the reply
"""

from __future__ import annotations

import asyncio
import logging
import sys

from membank.config import MemBankConfig, load_config


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


async def _chat(config: MemBankConfig) -> None:
    from membank.connectors.cli import CLIConnector
    from membank.core import MemoryBankHandler

    handler = MemoryBankHandler(config)
    cli = CLIConnector()
    try:
        await cli.start(handler.handle_message)
    finally:
        await cli.stop()
        await handler.close()


async def _run_once(config: MemBankConfig, text: str) -> str | None:
    from membank.core import MemoryBankHandler

    handler = MemoryBankHandler(config)
    try:
        return await handler.handle(text)
    finally:
        await handler.close()


def _run_cli() -> None:
    """Interactive CLI REPL mode."""
    config = load_config()
    _setup_logging(config.log_level)

    try:
        asyncio.run(_chat(config))
    except KeyboardInterrupt:
        pass


def _run_single(text: str) -> None:
    config = load_config()
    _setup_logging(config.log_level)

    reply = asyncio.run(_run_once(config, text))
    if reply is None:
        print(f"Not a memory command: {text}", file=sys.stderr)
        sys.exit(1)
    print(reply)


def main() -> None:
    cmd = sys.argv[1] if len(sys.argv) > 1 else "chat"

    if cmd in ("chat", "repl"):
        _run_cli()
    elif cmd == "run" and len(sys.argv) > 2:
        _run_single(" ".join(sys.argv[2:]))
    else:
        print("Usage: python -m membank [chat|run <command>]")
        print("  chat         : Interactive CLI REPL (default)")
        print('  run "<text>" : Handle one command, e.g. run "!get birthday"')
        sys.exit(1)


if __name__ == "__main__":
    main()
