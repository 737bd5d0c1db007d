"""Perch exception hierarchy.

Shared across the pattern compiler, the matcher, and the dispatch
resolver so every module raises and catches the same types.

A path that does not satisfy a route is *not* an error: matching
returns ``None`` and the caller moves on to the next route.
"""

from dataclasses import dataclass


class PerchError(Exception):
    """Base for all perch-specific errors."""


class ConfigurationError(PerchError):
    """Raised when a template, constraint, callback or config is invalid.

    Typically raised at registration time, before any request is served.
    """


@dataclass(frozen=True, slots=True)
class HTTPError(PerchError):
    """An error that maps directly to an HTTP status code.

    The host server decides how to render it; perch only picks the status.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """404 — the request cannot be served by this route."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class MissingRequiredParameter(NotFound):  # noqa: N818
    """404 — a required parameter was absent after a successful match.

    Only reachable when a compiled pattern disagrees with its own
    parameter metadata, so it points at a compiler or configuration bug
    rather than at bad user input.
    """

    parameter: str

    def __init__(self, parameter: str) -> None:
        super().__init__(detail=f"Missing required parameter {parameter!r}")
        object.__setattr__(self, "parameter", parameter)


class TargetClassNotFound(HTTPError):  # noqa: N818
    """500 — a ``Class@method`` route names a class that does not exist."""

    class_name: str

    def __init__(self, class_name: str) -> None:
        super().__init__(status=500, detail=f"Class {class_name} does not exist")
        object.__setattr__(self, "class_name", class_name)


class TargetMethodNotFound(NotFound):  # noqa: N818
    """404 — the target class exists but lacks the routed method."""

    class_name: str
    method: str

    def __init__(self, class_name: str, method: str) -> None:
        super().__init__(detail=f"Method {method} does not exist in class {class_name}")
        object.__setattr__(self, "class_name", class_name)
        object.__setattr__(self, "method", method)
