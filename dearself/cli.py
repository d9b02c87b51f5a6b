#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
DearSelf - Command line
Usage:
    python -m dearself serve [--host HOST] [--port PORT] [--dev] [--reload]
    python -m dearself breathe [--pattern NAME] [--cycles N]
    python -m dearself patterns
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from dearself.config import AppConfig
from dearself.core.breathing import PATTERNS, BreathingSession, get_pattern
from dearself.core.exceptions import ConfigError
from dearself.core.ticker import AsyncioTicker
from dearself.core.timer import BreathingTimer
from dearself.utils.logger import setup_from_config, setup_logging

logger = logging.getLogger(__name__)

# ===== SERVE =====

def cmd_serve(args) -> int:
    import uvicorn
    from dearself.web.config import WebSettings

    try:
        config = AppConfig(args.env_file)
    except ConfigError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1
    setup_from_config(config)
    settings = WebSettings()

    host = args.host or settings.HOST
    port = args.port or settings.PORT
    logger.info(f"🚀 Starting web server on http://{host}:{port}")
    if args.dev:
        logger.info(f"📚 API docs: http://{host}:{port}{settings.DOCS_URL}")

    try:
        uvicorn.run(
            "dearself.web.app:create_app",
            factory=True,
            host=host,
            port=port,
            reload=args.reload,
            log_level="debug" if args.dev else settings.LOG_LEVEL.lower(),
            server_header=False,
        )
    except KeyboardInterrupt:
        logger.info("👋 Server stopped")
    return 0

# ===== BREATHE =====

def _print_tick(session: BreathingSession) -> None:
    print(
        f"\r{session.instruction:<12} {session.seconds_remaining:>2}s   "
        f"cycles: {session.cycles_completed}",
        end="",
        flush=True,
    )

async def run_breathing(pattern_name: str, cycles: int, interval: float = 1.0) -> BreathingSession:
    """Guide a session in the terminal until the requested cycles are done"""
    pattern = get_pattern(pattern_name)
    if pattern is None:
        raise ValueError(f"Unknown breathing pattern: {pattern_name}")

    timer = BreathingTimer(AsyncioTicker(interval))
    timer.select_pattern(pattern)
    done = asyncio.Event()

    def on_tick(session: BreathingSession) -> None:
        _print_tick(session)
        if session.cycles_completed >= cycles:
            done.set()

    timer.on_tick(on_tick)
    print(f"🌬️ {pattern.name}: {pattern.description}")
    _print_tick(timer.session)
    timer.start()
    try:
        await done.wait()
    finally:
        timer.close()
        print()
    return timer.session

def cmd_breathe(args) -> int:
    setup_logging("WARNING")
    try:
        session = asyncio.run(run_breathing(args.pattern, args.cycles))
    except ValueError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\n👋 Stopped")
        return 0
    print(f"✅ {session.cycles_completed} cycles in {session.elapsed_seconds}s")
    return 0

def cmd_patterns(args) -> int:
    for pattern in PATTERNS:
        durations = "-".join(str(seconds) for seconds in pattern.durations.values())
        print(f"{pattern.name:<20} {durations:<10} {pattern.benefit}")
    return 0

# ===== ENTRY POINT =====

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="dearself", description="DearSelf wellness tracker")
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the web application")
    serve.add_argument('--host', default=None, help='Bind host')
    serve.add_argument('--port', type=int, default=None, help='Bind port')
    serve.add_argument('--dev', action='store_true', help='Development mode')
    serve.add_argument('--reload', action='store_true', help='Reload on code changes')
    serve.add_argument('--env-file', default=None, help='Path to a .env file')
    serve.set_defaults(func=cmd_serve)

    breathe = subparsers.add_parser("breathe", help="Guided breathing in the terminal")
    breathe.add_argument('--pattern', default=PATTERNS[0].name,
                         choices=[pattern.name for pattern in PATTERNS])
    breathe.add_argument('--cycles', type=int, default=4, help='Cycles to complete')
    breathe.set_defaults(func=cmd_breathe)

    patterns = subparsers.add_parser("patterns", help="List breathing patterns")
    patterns.set_defaults(func=cmd_patterns)

    return parser

def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    return args.func(args)

if __name__ == "__main__":
    sys.exit(main())
