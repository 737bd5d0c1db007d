"""Template compilation and path matching.

A template such as ``/user/{id}/edit/{slug?}`` is scanned once, left to
right, into an anchored regex with one named group per placeholder::

    /user/{id}      -> ^/user/?(?P<id>[\\w-]+)[^/]?/?\\Z
    /post/{slug?}   -> ^/post(?:/?(?P<slug>[\\w-]+)[^/]?)?/?\\Z

A placeholder absorbs the ``/`` in front of it, so an optional trailing
parameter drops cleanly along with its separator. The ``[^/]?`` after
each group is a stop token: it may consume one stray non-separator
character so that it never lands in the capture.

Compiled patterns are immutable and safe to share between threads.
"""

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass

from perch.config import DEFAULT_CONFIG, RouterConfig
from perch.errors import ConfigurationError, MissingRequiredParameter

logger = logging.getLogger("perch.routing")

SEPARATOR = "/"

# Legacy mode only escapes these two literal characters
_LEGACY_ESCAPES = {"/": "/", ".": r"\."}


@dataclass(frozen=True, slots=True)
class ParameterSpec:
    """A named placeholder in template order."""

    name: str
    required: bool = True


@dataclass(frozen=True, slots=True)
class CompiledPattern:
    """The anchored matcher plus ordered parameter metadata for a template."""

    template: str
    regex: re.Pattern[str]
    parameters: tuple[ParameterSpec, ...]

    @property
    def parameter_names(self) -> tuple[str, ...]:
        return tuple(spec.name for spec in self.parameters)

    def match(self, path: str) -> dict[str, str] | None:
        """Match *path*; see :func:`match_pattern`."""
        return match_pattern(self, path)


def _literal(character: str, config: RouterConfig) -> str:
    if config.escape_literals:
        return re.escape(character)
    return _LEGACY_ESCAPES.get(character, character)


def _parameter_fragment(name: str, sub_pattern: str, *, required: bool) -> str:
    fragment = f"{SEPARATOR}?(?P<{name}>{sub_pattern})[^{SEPARATOR}]?"
    if required:
        return fragment
    return f"(?:{fragment})?"


def _check_constraint(name: str, sub_pattern: str, template: str) -> None:
    try:
        compiled = re.compile(sub_pattern)
    except re.error as exc:
        msg = f"Invalid constraint for {name!r} in {template!r}: {exc}"
        raise ConfigurationError(msg) from exc
    if compiled.groupindex:
        msg = (
            f"Constraint for {name!r} in {template!r} defines named groups; "
            "use (?:...) for grouping."
        )
        raise ConfigurationError(msg)


def compile_pattern(
    template: str,
    where: Mapping[str, str] | None = None,
    config: RouterConfig = DEFAULT_CONFIG,
) -> CompiledPattern:
    """Compile a path template into an anchored :class:`CompiledPattern`.

    Args:
        template: Path template with ``{name}`` (required) and
            ``{name?}`` (optional) placeholders.
        where: Per-parameter sub-pattern overrides. Parameters without
            an entry use ``config.default_parameter_pattern``.
        config: Placeholder syntax, escaping and regex flags.

    Raises:
        ConfigurationError: On an unterminated or empty placeholder, an
            invalid or duplicate parameter name, or an invalid constraint.
    """
    where = where or {}
    regex = ""
    parameters: list[ParameterSpec] = []
    seen: set[str] = set()
    in_parameter = False
    name = ""

    for character in template:
        if character == config.param_open and not in_parameter:
            if regex.endswith(SEPARATOR):
                regex = regex[: -len(SEPARATOR)]
            in_parameter = True
        elif in_parameter and character == config.param_close:
            required = not name.endswith(config.optional_symbol)
            if not required:
                name = name[: -len(config.optional_symbol)]
            if not name.isidentifier():
                msg = f"Invalid parameter name {name!r} in template {template!r}"
                raise ConfigurationError(msg)
            if name in seen:
                msg = f"Duplicate parameter {name!r} in template {template!r}"
                raise ConfigurationError(msg)
            seen.add(name)

            sub_pattern = where.get(name, config.default_parameter_pattern)
            _check_constraint(name, sub_pattern, template)
            regex += _parameter_fragment(name, sub_pattern, required=required)
            parameters.append(ParameterSpec(name=name, required=required))

            name = ""
            in_parameter = False
        elif in_parameter:
            name += character
        else:
            regex += _literal(character, config)

    if in_parameter:
        msg = f"Unterminated placeholder {config.param_open}{name} in template {template!r}"
        raise ConfigurationError(msg)

    if not config.escape_literals:
        logger.warning(
            "Template %r compiled without literal escaping; regex metacharacters "
            "in literal segments are live.",
            template,
        )

    compiled = _compile_regex(f"^{regex}{SEPARATOR}?\\Z", template, config)
    logger.debug("Compiled %r -> %s", template, compiled.pattern)
    return CompiledPattern(template=template, regex=compiled, parameters=tuple(parameters))


def compile_override(
    template: str,
    pattern: str,
    config: RouterConfig = DEFAULT_CONFIG,
) -> CompiledPattern:
    """Wrap a whole-route regex override as a :class:`CompiledPattern`.

    The override is used as written. Its named groups become optional
    parameters, in group order.
    """
    compiled = _compile_regex(pattern, template, config)
    ordered = sorted(compiled.groupindex.items(), key=lambda item: item[1])
    parameters = tuple(ParameterSpec(name=name, required=False) for name, _ in ordered)
    return CompiledPattern(template=template, regex=compiled, parameters=parameters)


def _compile_regex(pattern: str, template: str, config: RouterConfig) -> re.Pattern[str]:
    try:
        return re.compile(pattern, config.flags)
    except re.error as exc:
        msg = f"Template {template!r} produced an invalid pattern {pattern!r}: {exc}"
        raise ConfigurationError(msg) from exc


def match_pattern(compiled: CompiledPattern, path: str) -> dict[str, str] | None:
    """Match a request path against a compiled pattern.

    Returns ``None`` when the path does not match. Otherwise returns the
    bound parameters in template order; optional parameters that were
    not supplied are left out.

    Raises:
        MissingRequiredParameter: A required group did not participate
            in an otherwise successful match. The compiler never builds
            such a pattern, so this signals a broken pattern.
    """
    found = compiled.regex.match(path)
    if found is None:
        return None

    params: dict[str, str] = {}
    for spec in compiled.parameters:
        value = found.group(spec.name)
        if value is None:
            if spec.required:
                raise MissingRequiredParameter(spec.name)
            continue
        params[spec.name] = value
    return params
