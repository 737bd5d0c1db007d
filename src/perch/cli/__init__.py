"""Perch CLI — inspect templates and try routes from the shell.

Entry point registered as ``perch`` in ``pyproject.toml``::

    [project.scripts]
    perch = "perch.cli:main"
"""

import argparse
import logging
import sys


def _add_where(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--where",
        action="append",
        default=[],
        metavar="NAME=REGEX",
        help="Constrain a parameter (repeatable)",
    )


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``perch`` command."""
    parser = argparse.ArgumentParser(
        prog="perch",
        description="Perch — compile route templates and match request paths.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output")
    subparsers = parser.add_subparsers(dest="command")

    # -- perch compile ----------------------------------------------------
    compile_parser = subparsers.add_parser("compile", help="Show the regex for a template")
    compile_parser.add_argument("template", help="Route template (e.g. /user/{id})")
    _add_where(compile_parser)

    # -- perch match ------------------------------------------------------
    match_parser = subparsers.add_parser("match", help="Match a path against a template")
    match_parser.add_argument("template", help="Route template (e.g. /user/{id})")
    match_parser.add_argument("path", help="Request path (e.g. /user/42)")
    _add_where(match_parser)

    # -- perch dispatch ---------------------------------------------------
    dispatch_parser = subparsers.add_parser("dispatch", help="Match and invoke a route")
    dispatch_parser.add_argument(
        "route", help="module:name, an attribute or a named entry of the module's routes"
    )
    dispatch_parser.add_argument("path", help="Request path (e.g. /user/42)")

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s %(levelname)s %(message)s")

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "compile":
        from perch.cli._pattern import run_compile

        run_compile(args)
    elif args.command == "match":
        from perch.cli._pattern import run_match

        run_match(args)
    elif args.command == "dispatch":
        from perch.cli._dispatch import run_dispatch

        run_dispatch(args)
