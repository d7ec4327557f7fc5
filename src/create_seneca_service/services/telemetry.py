"""Stage timing for the bootstrap pipeline.

``--verbose`` turns it on. ``@traced`` opens a root span around a service
operation, each ``stage()`` inside it adds a child, and the finished tree
is attached to ``ServiceResult.meta["telemetry"]``. When off, every call
is a single ContextVar lookup.
"""

from __future__ import annotations

import functools
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, ParamSpec, TypeVar

import structlog

from create_seneca_service.services.result import ServiceResult

_enabled: ContextVar[bool] = ContextVar("_enabled", default=False)
_current: ContextVar[Span | None] = ContextVar("_current", default=None)


@dataclass
class Span:
    """One timed stage and the facts recorded about it."""

    name: str
    annotations: dict[str, Any] = field(default_factory=dict)
    children: list[Span] = field(default_factory=list)
    started: float = field(default_factory=time.perf_counter)
    finished: float | None = None

    @property
    def duration_ms(self) -> float:
        if self.finished is None:
            return 0.0
        return (self.finished - self.started) * 1000

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"name": self.name, "duration_ms": round(self.duration_ms, 2)}
        if self.annotations:
            data["annotations"] = dict(self.annotations)
        if self.children:
            data["children"] = [child.to_dict() for child in self.children]
        return data


def enable_telemetry() -> None:
    """Record spans for the rest of this context (set once by AppContext)."""
    _enabled.set(True)


@contextmanager
def stage(name: str, **annotations: Any) -> Iterator[None]:
    """Time a pipeline stage as a child of the running operation.

    Keyword arguments are stored on the span, e.g.
    ``stage("install", dependencies=7)``.
    """
    parent = _current.get() if _enabled.get() else None
    if parent is None:
        yield
        return

    span = Span(name=name, annotations=annotations)
    parent.children.append(span)
    token = _current.set(span)
    try:
        yield
    finally:
        span.finished = time.perf_counter()
        _current.reset(token)


_P = ParamSpec("_P")
_R = TypeVar("_R")


def traced(func: Callable[_P, _R]) -> Callable[_P, _R]:
    """Open a root span around a service operation and attach the tree to its result."""

    @functools.wraps(func)
    def wrapper(*args: _P.args, **kwargs: _P.kwargs) -> _R:
        if not _enabled.get():
            return func(*args, **kwargs)

        root = Span(name=func.__qualname__)
        token = _current.set(root)
        ok = False
        try:
            result = func(*args, **kwargs)
            ok = isinstance(result, ServiceResult) and result.ok
        finally:
            root.finished = time.perf_counter()
            _current.reset(token)
            structlog.get_logger(__name__).debug(
                "operation.timed",
                operation=root.name,
                duration_ms=round(root.duration_ms, 2),
                stages=[child.name for child in root.children],
                ok=ok,
            )

        if isinstance(result, ServiceResult):
            meta = {**(result.meta or {}), "telemetry": root.to_dict()}
            return result.model_copy(update={"meta": meta})  # type: ignore[return-value]
        return result

    return wrapper
