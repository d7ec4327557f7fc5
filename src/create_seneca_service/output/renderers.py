"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO). The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json as _json
from pathlib import Path
from typing import TYPE_CHECKING, Any

from rich.text import Text

from create_seneca_service.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from create_seneca_service.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
    else:
        renderer = _ERROR_RENDERERS.get(result.op, _render_error)
    renderer(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK status line."""
    console.print(Text.assemble(("OK", "css.ok"), (f"  {result.op}", "css.op")))


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="css.key")
    if key in ("root", "path"):
        v = Text(str(value), style="css.path")
    elif key == "package":
        v = Text(str(value), style="css.package")
    elif isinstance(value, (dict, list)):
        v = Text(_json.dumps(value, separators=(",", ":")))
    else:
        v = Text(str(value))
    console.print(Text.assemble(k, v))


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print meta block including the telemetry span tree (verbose only)."""
    if not result.meta:
        return

    console.print()
    console.print(Text("  meta:", style="dim"))

    for k, v in result.meta.items():
        if k == "telemetry":
            _render_telemetry_tree(console, v, indent=4)
        else:
            console.print(f"    {k}: {v}")


def _render_telemetry_tree(
    console: Console,
    span_data: dict[str, Any],
    indent: int = 4,
) -> None:
    """Render a hierarchical span tree with timings."""
    prefix = " " * indent
    name = span_data.get("name", "?")
    duration = span_data.get("duration_ms", 0.0)
    facts = " ".join(f"{k}={v}" for k, v in span_data.get("annotations", {}).items())
    line = f"{prefix}{name}  {duration:.2f}ms"
    console.print(Text(f"{line}  {facts}" if facts else line))
    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 2)


# ── Error renderers ───────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="css.error")
    op = Text(f"  {result.op}", style="css.op")
    sep = Text(" — ")
    console.print(label, op, sep, msg)

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


def _render_create_project_error(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    """Render a failed bootstrap, listing what the rollback removed."""
    _render_error(result, console, verbose=verbose)
    detail = result.error.detail if result.error else {}
    if "deleted" not in detail:
        return

    console.print()
    for name in detail["deleted"]:
        console.print(Text("Deleting generated file..."), Text(name, style="css.deleted"))
    if detail.get("removed_root"):
        root = Path(str(detail.get("root", "")))
        console.print(
            Text("Deleting"),
            Text(f"{root.name}/", style="css.deleted"),
            Text("from"),
            Text(str(root.parent), style="css.deleted"),
        )
    console.print("Done.")


# ── Success renderers ─────────────────────────────────────────────────


def _render_create_project(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    """Render a successful bootstrap."""
    _status_line(console, result)
    d = result.data
    for key in ("app_name", "root", "package", "reference"):
        if key in d:
            _field(console, key, d[key])
    pinned = d.get("pinned", {})
    if pinned:
        _field(console, "pinned", len(pinned))
        if verbose:
            for name, version in pinned.items():
                console.print(f"    {name}: {version}")
    if verbose:
        deps = d.get("dependencies", [])
        if deps:
            _field(console, "dependencies", ", ".join(deps))
        _render_meta(console, result)


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch tables ───────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "create_project": _render_create_project,
}

_ERROR_RENDERERS: dict[str, Any] = {
    "create_project": _render_create_project_error,
}
