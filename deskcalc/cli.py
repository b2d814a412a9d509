"""Command line tool for inspecting and combining session files."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from .evaluator import Evaluator
from .numeric import format_display
from .session import (
    CalculationLog,
    FormatError,
    ReconcilePolicy,
    SessionError,
    load_session_file,
    reconcile,
    save_session_file,
    snapshot_session,
)
from .settings.store import FORMAT_CODES, PRECISIONS

logger = logging.getLogger(__name__)


def _cmd_show(args: argparse.Namespace) -> int:
    session = load_session_file(args.session, strict_variables=args.strict)
    print(f"{len(session.calculations)} calculation(s)")
    for calc in session.calculations:
        if calc.is_error:
            print(f"  {calc.expression}  ->  error: {calc.outcome}")
        else:
            print(f"  {calc.expression}  =  {format_display(calc.outcome, args.format, args.precision)}")
    print(f"{len(session.variables)} variable(s)")
    for var in session.variables:
        print(f"  {var.name} = {format_display(var.value, args.format, args.precision)}")
    return 0


def _cmd_check(args: argparse.Namespace) -> int:
    session = load_session_file(args.session, strict_variables=args.strict)
    print(f"OK: {args.session} ({len(session.calculations)} calculations, {len(session.variables)} variables)")
    return 0


def _cmd_merge(args: argparse.Namespace) -> int:
    # Decode everything first so a bad input leaves no output file behind
    sessions = [load_session_file(p, strict_variables=args.strict) for p in args.sessions]

    log = CalculationLog()
    evaluator = Evaluator()
    for session in sessions:
        reconcile(session, ReconcilePolicy.MERGE, log, evaluator)

    merged = snapshot_session(log, evaluator)
    save_session_file(args.output, merged)
    print(f"Wrote {args.output} ({len(merged.calculations)} calculations, {len(merged.variables)} variables)")
    return 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="deskcalc-session", description="Inspect and merge deskcalc session files.")
    ap.add_argument("-v", "--verbose", action="store_true", help="Log debug messages (e.g. skipped variables)")
    ap.add_argument(
        "--strict",
        action="store_true",
        help="Reject files containing a variable with a non-numeric value instead of skipping it",
    )
    sub = ap.add_subparsers(dest="command", required=True)

    show = sub.add_parser("show", help="Print the calculations and variables of a session")
    show.add_argument("session", help="Path to a .sch session file")
    show.add_argument("--format", default="g", choices=FORMAT_CODES, help="Number format code")
    show.add_argument("--precision", type=int, default=-1, choices=PRECISIONS, help="Display precision (-1 = auto)")
    show.set_defaults(func=_cmd_show)

    check = sub.add_parser("check", help="Validate a session file")
    check.add_argument("session", help="Path to a .sch session file")
    check.set_defaults(func=_cmd_check)

    merge = sub.add_parser("merge", help="Merge sessions in order; later variables win")
    merge.add_argument("sessions", nargs="+", help="Session files to merge")
    merge.add_argument("-o", "--output", required=True, help="Output session file")
    merge.set_defaults(func=_cmd_merge)

    return ap


def main(argv: Optional[List[str]] = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )

    try:
        return int(args.func(args))
    except FormatError as e:
        print(f"error: not a valid session: {e}", file=sys.stderr)
        return 2
    except SessionError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
