"""``perch compile`` and ``perch match`` — template inspection commands."""

import argparse
import json
import sys

from perch.errors import ConfigurationError, MissingRequiredParameter
from perch.routing.pattern import CompiledPattern, compile_pattern


def parse_where(items: list[str]) -> dict[str, str]:
    """Parse repeated ``NAME=REGEX`` options into a constraint mapping."""
    where: dict[str, str] = {}
    for item in items:
        name, sep, pattern = item.partition("=")
        if not sep or not name:
            msg = f"--where expects NAME=REGEX, got {item!r}"
            raise ConfigurationError(msg)
        where[name] = pattern
    return where


def _compile(args: argparse.Namespace) -> CompiledPattern:
    try:
        return compile_pattern(args.template, parse_where(args.where))
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(2) from exc


def run_compile(args: argparse.Namespace) -> None:
    """Print the compiled regex and parameter list for a template."""
    compiled = _compile(args)
    print(compiled.regex.pattern)
    for spec in compiled.parameters:
        flag = "required" if spec.required else "optional"
        print(f"  {spec.name}  {flag}")


def run_match(args: argparse.Namespace) -> None:
    """Print bound parameters as JSON. Exits 1 when the path does not match."""
    compiled = _compile(args)
    try:
        params = compiled.match(args.path)
    except MissingRequiredParameter as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(2) from exc

    if params is None:
        print(f"No match: {args.path!r} does not satisfy {args.template!r}", file=sys.stderr)
        raise SystemExit(1)
    print(json.dumps(params))
