"""Operation-specific Rich renderers for ServiceResult.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from nullconf.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from nullconf.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich."""
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"
    if "duration" in result.data:
        return str(result.data["duration"])
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="nc.ok"), Text(f"  {result.op}", style="nc.op"))


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="nc.key")
    if value is None:
        v = Text("null", style="nc.absent")
    elif key == "duration":
        v = Text(str(value), style="nc.duration")
    elif isinstance(value, (dict, list)):
        v = Text(json.dumps(value, separators=(",", ":"), ensure_ascii=False))
    else:
        v = Text(str(value))
    console.print(k, v, sep="")


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    console.print(Text("ERROR", style="nc.error"), Text(f"  {result.op}", style="nc.op"), "—")
    console.print(msg)

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Operation renderers ───────────────────────────────────────────────


def _render_duration(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render parse_duration / duration_from_json results."""
    _status_line(console, result)
    keys = ["input", "duration", "valid", "json"]
    if verbose:
        keys.append("nanoseconds")
    for key in keys:
        if key in result.data:
            _field(console, key, result.data[key])


def _render_fields(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render decoded document fields as a table."""
    _status_line(console, result)
    fields: dict[str, Any] = result.data.get("fields", {})
    if not fields:
        console.print("  (no fields)")
        return

    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Field", style="nc.key", no_wrap=True)
    table.add_column("Value")
    for name, value in fields.items():
        if value is None:
            table.add_row(name, Text("null", style="nc.absent"))
        else:
            table.add_row(name, json.dumps(value, ensure_ascii=False))
    console.print(table)


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "parse_duration": _render_duration,
    "duration_from_json": _render_duration,
    "decode_fields": _render_fields,
}
