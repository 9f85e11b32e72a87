"""Main CLI entry-point."""
from __future__ import annotations

import argparse
import asyncio
import shutil
import sys

from core.logging.config import bootstrap_logging, shutdown_logging
from config import settings
from domain.errors import ConfigurationError

_BRIGHT_GREEN = "\033[1;92m"
_CYAN = "\033[96m"
_YELLOW = "\033[93m"
_RESET = "\033[0m"


def _g(s: str) -> str:
    return f"{_BRIGHT_GREEN}{s}{_RESET}"


def _c(s: str) -> str:
    return f"{_CYAN}{s}{_RESET}"


def _print_logo() -> None:
    cols = shutil.get_terminal_size(fallback=(100, 20)).columns
    div = "═" * min(cols, 72)
    print(_g(div))
    print(_c("  League of Legends Ranked Match History Analyzer"))
    print(_g(div))


def _csv(value: str) -> list[str]:
    return [v.strip() for v in value.split(",") if v.strip()]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="match-history",
        description="Compare a player's lane and team stats over their recent ranked games.",
    )
    parser.add_argument("summoner", nargs="?", help="target summoner name (default: TARGET_SUMMONER)")
    parser.add_argument("-r", "--region", help="platform, e.g. na1 or euw (default: REGION)")
    parser.add_argument("--with", dest="required", type=_csv, help="comma list of allies that must be in the game")
    parser.add_argument("--without", dest="excluded", type=_csv, help="comma list of players that must not be in the game")
    parser.add_argument("--role", type=_csv, help="comma list of roles, e.g. DUO_CARRY,SOLO")
    parser.add_argument("--lane", type=_csv, help="comma list of lanes, e.g. BOTTOM")
    parser.add_argument("--ally-lane", dest="ally_lanes", type=_csv, help="lanes compared for team totals")
    parser.add_argument("--log-level", default=settings.LOG_LEVEL)
    return parser


def main(argv: list[str]) -> int:
    args = build_parser().parse_args(argv)
    bootstrap_logging(
        service="match-history",
        level=args.log_level,
        log_dir=settings.LOG_DIR,
        log_file_name="match_history.jsonl",
    )
    # Lazy import so logging is configured before any module logger is used
    from presentation.cli import AnalyzeCommand

    try:
        _print_logo()
        command = AnalyzeCommand(
            target_name=args.summoner,
            region=args.region,
            required_allies=args.required,
            excluded_allies=args.excluded,
            roles=args.role,
            lanes=args.lane,
            ally_lanes=args.ally_lanes,
        )
        if not command.target_name:
            print(f"  {_YELLOW}No summoner given (argument or TARGET_SUMMONER).{_RESET}")
            return 2
        return asyncio.run(command.run())
    except ConfigurationError as exc:
        print(f"  {_YELLOW}{exc}{_RESET}")
        return 2
    except ValueError as exc:
        print(f"  {_YELLOW}Invalid option: {exc}{_RESET}")
        return 2
    except KeyboardInterrupt:
        print(f"\n  {_YELLOW}Interrupted.{_RESET}")
        return 130
    finally:
        shutdown_logging()


def run() -> int:
    return main(sys.argv[1:])


if __name__ == "__main__":
    raise SystemExit(run())
