# src/addchain/cli.py

"""
Addition Chain Finder - command line front end

Description:
    Finds an addition chain (1, then every element the sum of two earlier
    ones, strictly increasing) with a given number of elements and a given
    total. Prints the first chain found or "No solution.".

usage: see addchain -h
"""

from __future__ import annotations

import argparse
import faulthandler
import sys
import textwrap
import time
import traceback
from importlib.resources import files as pkg_files
from typing import NamedTuple

from colorama import Fore, Style
from colorama import init as colorama_init

import addchain.config as CONFIG
from addchain import __version__ as _ver
from addchain.fmt import format_header, format_result, format_stats
from addchain.output_manager import OutputManager
from addchain.runtime import APPLY, CFG, debug
from addchain.runtime import current as _rt_current
from addchain.runtime import reset as reset_runtime
from addchain.search import SearchAborted, SearchLimits, SearchResult, search
from addchain.utility import (
    UserInputError,
    flatten_dotted,
    parse_positive_int,
    typename,
    validate_output_setting,
)
from addchain.workspace import ensure_workspace_seeded, seed_workspace, workspace_dir

EXIT_FOUND = 0
EXIT_NO_SOLUTION = 1
EXIT_USAGE = 2
EXIT_ABORTED = 3
EXIT_INTERRUPTED = 130

_COMMANDS = ("init", "where", "profiles")


# In memory session history
class HistoryItem(NamedTuple):
    target_length: int
    target_sum: int
    values: tuple[int, ...] | None
    timestamp: float


_HISTORY: list[HistoryItem] = []


def add_to_history(result: SearchResult) -> None:
    vals = tuple(result.values) if result.found else None
    _HISTORY.append(HistoryItem(result.target_length, result.target_sum, vals, time.time()))


def get_history() -> list[HistoryItem]:
    return list(_HISTORY)


def clear_history() -> None:
    _HISTORY.clear()


def _install_loud_error_handlers(debug_on: bool) -> None:
    if not debug_on:
        return
    try:
        faulthandler.enable()
    except (OSError, ValueError):
        # stderr without a real file descriptor (captured or redirected)
        pass

    def _excepthook(exc_type, exc, tb):
        sys.stderr.write("\n[UNCAUGHT EXCEPTION]\n")
        traceback.print_exception(exc_type, exc, tb, file=sys.stderr)
        sys.stderr.flush()
    sys.excepthook = _excepthook


def _print_user_error(msg: str) -> None:
    """Uniform, one-line friendly error."""
    if msg.startswith("Invalid input:"):
        msg = msg.replace("Invalid input:", f"{Fore.RED}Invalid input:{Style.RESET_ALL}", 1)
    elif not msg.startswith("Error:"):
        msg = f"{Fore.RED}Error:{Style.RESET_ALL} {msg}"
    print(msg, file=sys.stderr)


def _resolve_inputs(items: list[str]) -> tuple[str | None, int | None, int | None]:
    """Return (command, target_length, target_sum) from the positionals.

    Rules:
      - no items         -> interactive mode
      - one known command -> (command, None, None)
      - two integers     -> (None, length, sum)
      - anything else    -> UserInputError
    """
    if not items:
        return None, None, None
    if len(items) == 1 and items[0].lower() in _COMMANDS:
        return items[0].lower(), None, None
    if len(items) != 2:
        raise UserInputError(
            "Invalid input: expected a chain length and a target sum, "
            f"or one of: {', '.join(_COMMANDS)}."
        )
    length = parse_positive_int(items[0], "chain length")
    total = parse_positive_int(items[1], "target sum")
    return None, length, total


def _select_profile_name(explicit: str | None) -> str:
    """
    Precedence:
      1) explicit --profile
      2) last used (from workspace)
      3) 'default'
    """
    if explicit:
        return explicit
    last = CONFIG.read_current_profile()
    if last and CONFIG.has_profile(last):
        return last
    return "default"


def _apply_profile(name: str, *, force_debug: bool = False) -> None:
    selected = CONFIG.load_settings(name)
    APPLY(selected)  # install into runtime
    rt = _rt_current()
    # --debug wins over BEHAVIOUR.DEBUG = false
    rt.debug = rt.debug or force_debug

    if rt.debug:
        debug(f"active profile: {selected.name}")
        if selected._source:
            debug(f"profile file: {selected._source}")
        flat = flatten_dotted(selected.as_dict())
        debug("profile keys (runtime value/type):")
        for k in sorted(flat.keys(), key=str.lower):
            v = CFG(k, None)
            debug(f"  {k:.<40} {v!r} ({typename(v)})")


def _limits_from_args(args) -> SearchLimits:
    """Profile limits, overridden per field by --max-nodes / --timeout."""
    base = SearchLimits.from_runtime()
    nodes = base.max_nodes if args.max_nodes is None else (args.max_nodes or None)
    secs = base.time_limit_s if args.timeout is None else (args.timeout or None)
    return SearchLimits(max_nodes=nodes, time_limit_s=secs)


def run_search(target_length: int, target_sum: int, *, limits: SearchLimits,
               om: OutputManager, show_stats: bool) -> int:
    """Search, print the outcome and return the exit code."""
    debug(f"search length={target_length} sum={target_sum} "
          f"max_nodes={limits.max_nodes} time_limit_s={limits.time_limit_s}")
    try:
        result = search(target_length, target_sum, limits=limits)
    except SearchAborted as e:
        print(f"{Fore.YELLOW}Search aborted:{Style.RESET_ALL} {e.reason}.", file=sys.stderr)
        if show_stats:
            om.write(format_stats(e.stats))
        return EXIT_ABORTED

    om.write(format_result(result))
    if show_stats:
        om.write(format_stats(result.stats))
    debug(format_stats(result.stats))
    add_to_history(result)
    return EXIT_FOUND if result.found else EXIT_NO_SOLUTION


# ---- argparse ----
def _build_parser() -> argparse.ArgumentParser:

    epilog = textwrap.dedent("""\
    commands:
      init
          Create the workspace folder and copy the packaged profiles if missing.

      where
          Show the workspace and package paths.

      profiles
          List the available profiles.

    exit status:
      0 chain found, 1 no solution, 2 bad input, 3 search limit reached
    """)

    p = argparse.ArgumentParser(
        prog="addchain",
        description="Addition chain finder: exact length, exact sum",
        usage=(
            "addchain [length sum] [--profile NAME] [--output FILE] [--quiet] [--stats] [--debug]\n"
            "       addchain init | where | profiles\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=epilog,
    )
    p.add_argument("items", nargs="*", metavar="length sum",
                   help="number of elements in the chain and the required total")
    p.add_argument("--profile", default=None, help="Profile to use (default: last used, else 'default')")
    p.add_argument("--output", default=None, help="Append results to a file (also prints unless --quiet)")
    p.add_argument("--quiet", action="store_true", help="Do not print results to the screen")
    p.add_argument("--stats", action="store_true", help="Print search statistics after each result")
    p.add_argument("--max-nodes", type=int, default=None, metavar="N",
                   help="Give up after visiting N partial chains (0 = unlimited)")
    p.add_argument("--timeout", type=float, default=None, metavar="SECONDS",
                   help="Give up after SECONDS of searching (0 = unlimited)")
    p.add_argument("--debug", action="store_true", help="Show tracebacks and [debug] trace info")
    p.add_argument("--version", action="version", version=f"%(prog)s {_ver}")

    return p


def main(argv=None) -> int:
    """Thin wrapper: catch friendly errors, hide tracebacks unless debug."""
    try:
        return _main_impl(argv)
    except UserInputError as e:
        _print_user_error(str(e))
        return EXIT_USAGE
    except KeyboardInterrupt:
        print("Aborted by user.", file=sys.stderr)
        return EXIT_INTERRUPTED
    except Exception as e:
        debug_on = "--debug" in (argv if argv is not None else sys.argv)
        if debug_on:
            raise
        print(f"Unexpected error: {e.__class__.__name__}: {e}", file=sys.stderr)
        print("Run with --debug for a full traceback.", file=sys.stderr)
        return 1


# ---- main ----
def _main_impl(argv=None) -> int:

    colorama_init(autoreset=True)

    parser = _build_parser()
    args = parser.parse_args(argv)
    rt = reset_runtime()
    rt.debug = bool(args.debug)

    _install_loud_error_handlers(args.debug)

    if args.max_nodes is not None and args.max_nodes < 0:
        parser.error("--max-nodes must be >= 0")
    if args.timeout is not None and args.timeout < 0:
        parser.error("--timeout must be >= 0")

    command, target_length, target_sum = _resolve_inputs(args.items)

    if command == "init":
        ws, copied = seed_workspace(overwrite=False)
        print(f"Workspace ready at: {ws}")
        print(f"Copied -> profiles: {copied.get('profiles', 0)}")
        return 0

    # Ensure a first-run workspace seed silently
    ensure_workspace_seeded()

    if command == "where":
        print(f"Workspace: {workspace_dir()}")
        print(f"Package:   {pkg_files('addchain')}")
        return 0
    if command == "profiles":
        print_profiles_with_descriptions()
        return 0

    if args.profile and not CONFIG.has_profile(args.profile):
        print(f"Unknown profile: '{args.profile}'", file=sys.stderr)
        print("Available profiles:", ", ".join(CONFIG.list_all_profiles()), file=sys.stderr)
        return EXIT_USAGE

    profile_name = _select_profile_name(args.profile)
    if not CONFIG.has_profile(profile_name):
        profile_name = "default"
    if CONFIG.has_profile(profile_name):
        _apply_profile(profile_name, force_debug=bool(args.debug))

    # --- output routing (CLI --output overrides profile OUTPUT_FILE) ---
    try:
        cli_target = validate_output_setting(args.output)
        target = cli_target if cli_target is not None else validate_output_setting(
            CFG("OUTPUT.OUTPUT_FILE", None) or None)
    except ValueError as e:
        print(f"Fatal error in output setting: {e}", file=sys.stderr)
        return EXIT_USAGE

    show_stats = bool(args.stats or CFG("OUTPUT.SHOW_STATS", False))

    # --- one-shot path ---
    if target_length is not None:
        om = OutputManager(output_file=target, quiet=args.quiet)
        try:
            return run_search(target_length, target_sum, limits=_limits_from_args(args),
                              om=om, show_stats=show_stats)
        finally:
            om.close()

    return _repl(args, profile_name, target, show_stats)


def print_profiles_with_descriptions() -> None:
    items = CONFIG.list_profiles_with_descriptions()
    if not items:
        print("No profiles found. Run 'addchain init'.")
        return
    width = max(len(nm) for nm, _ in items)
    for nm, desc in items:
        print(f"  {Fore.CYAN}{nm:<{width}}{Style.RESET_ALL}  {desc}")


def _show_help() -> None:
    print(textwrap.dedent("""\
        Enter a chain length (number of elements, the leading 1 included),
        then a target sum. Other input at the length prompt:
          h / help        this text
          hist            results of this session
          p / profiles    list profiles
          <profile name>  switch profile
          debug on|off    toggle [debug] lines
          q / quit        leave (an empty line also quits)"""))


def _print_history() -> None:
    hist = get_history()
    if not hist:
        print("History is empty.")
        return
    for item in hist:
        ts = time.strftime("%H:%M:%S", time.localtime(item.timestamp))
        shown = list(item.values) if item.values is not None else "no solution"
        print(f"{ts}  length={item.target_length:<4} sum={item.target_sum:<10} {shown}")


def _repl(args, profile_name: str, target: str | None, show_stats: bool) -> int:
    print(f"{Fore.YELLOW}{Style.BRIGHT}Addition Chain Finder v{_ver}{Style.RESET_ALL}")

    current_profile = profile_name
    while True:
        try:
            user_input = input(f"\nProfile: {current_profile} — Enter chain length (h=Help, q=Quit): ").strip()
            low = user_input.lower()
            if low in {"", "q", "quit"}:
                break

            if low in {"h", "help"}:
                _show_help()
                continue

            if low in {"p", "profiles"}:
                print_profiles_with_descriptions()
                continue

            if low in {"hist", "history"}:
                _print_history()
                continue

            if low.startswith("debug"):
                parts = low.split()
                rt = _rt_current()
                if len(parts) == 1 or parts[1] == "status":
                    print(f"Debug is currently {'ON' if rt.debug else 'OFF'}.")
                elif parts[1] == "on":
                    rt.debug = True
                    print("Debug mode enabled for this session.")
                elif parts[1] == "off":
                    rt.debug = False
                    print("Debug mode disabled for this session.")
                else:
                    print("Usage: DEBUG [on|off|status]")
                continue

            # treat as profile switch
            if not user_input[:1].isdigit() and CONFIG.has_profile(user_input):
                try:
                    _apply_profile(user_input, force_debug=bool(args.debug))
                except UserInputError as e:
                    _print_user_error(str(e))
                    continue
                CONFIG.write_current_profile(user_input)
                current_profile = user_input
                show_stats = bool(args.stats or CFG("OUTPUT.SHOW_STATS", False))
                print(f"Applied profile: {current_profile}")
                continue

            try:
                target_length = parse_positive_int(user_input, "chain length")
                target_sum = parse_positive_int(input("Enter target sum: "), "target sum")
            except UserInputError as e:
                _print_user_error(str(e))
                continue

            om = OutputManager(output_file=target, quiet=args.quiet)
            try:
                om.write(format_header(target_length, target_sum))
                run_search(target_length, target_sum, limits=_limits_from_args(args),
                           om=om, show_stats=show_stats)
            finally:
                om.close()

        except (EOFError, KeyboardInterrupt):
            print()
            break
    return 0
