"""Routing — template compilation, matching, settings inheritance and dispatch.

Routes are compiled and merged once, at registration time, into
immutable values that request workers can share freely.
"""

from perch.routing.callback import FunctionCallback, MethodCallback, parse_callback
from perch.routing.dispatch import (
    DispatchResult,
    ImportRegistry,
    MappingRegistry,
    ResolvedTarget,
    TargetRegistry,
    dispatch,
    invoke,
    resolve_target,
)
from perch.routing.group import RouteGroup
from perch.routing.pattern import CompiledPattern, ParameterSpec, compile_pattern, match_pattern
from perch.routing.route import Route
from perch.routing.settings import REQUEST_METHODS, RouteSettings, merge_settings

__all__ = [
    "REQUEST_METHODS",
    "CompiledPattern",
    "DispatchResult",
    "FunctionCallback",
    "ImportRegistry",
    "MappingRegistry",
    "MethodCallback",
    "ParameterSpec",
    "ResolvedTarget",
    "Route",
    "RouteGroup",
    "RouteSettings",
    "TargetRegistry",
    "compile_pattern",
    "dispatch",
    "invoke",
    "match_pattern",
    "merge_settings",
    "parse_callback",
    "resolve_target",
]
