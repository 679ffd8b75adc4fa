"""
Positional parameter substitution for dynamic text templates.

Two placeholder syntaxes are understood:

- ``{N}``: 0-based index, value rendered as a plain number.
- ``#N[fmt]%``: 1-based index as found in the game text map. ``fmt`` is ``i``
  (integer), ``fK`` (K decimals) or empty; a trailing ``%`` scales the value
  by 100 and appends a percent sign.

Substitution is best-effort: placeholders that cannot be filled (index out of
range, unknown format, non-finite value) are left verbatim.
"""

import re
from typing import Sequence

_PLACEHOLDER_RE = re.compile(r"\{(\d+)\}|#(\d+)\[([A-Za-z0-9]*)\](%?)")
_FIXED_FMT_RE = re.compile(r"f(\d+)")


def format_number(value: float, decimals: int | None = None) -> str:
    """Render a number for display.

    Integral values lose their decimal point; everything else is shown with
    at most four decimals and trailing zeros trimmed.

    Example:
        >>> format_number(50.0)
        '50'
        >>> format_number(8.000000000000002)
        '8'
        >>> format_number(0.125, decimals=1)
        '0.1'
    """
    if decimals is not None:
        return f"{value:.{decimals}f}"
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.4f}".rstrip("0").rstrip(".")


def format_stat_value(value: float, is_percent: bool) -> str:
    """Render a stat value, e.g. ``0.08`` as ``8%`` when it is a percentage."""
    if is_percent:
        return format_number(value * 100.0) + "%"
    return format_number(value)


def _render(value: float, fmt: str, is_percent: bool) -> str:
    if is_percent:
        value = value * 100.0
    fmt = fmt.lower()
    if fmt.startswith("i"):
        rendered = str(int(round(value)))
    elif fmt.startswith("f"):
        m = _FIXED_FMT_RE.fullmatch(fmt)
        if not m:
            raise ValueError(f"unknown number format {fmt!r}")
        rendered = format_number(value, decimals=int(m.group(1)))
    elif fmt:
        raise ValueError(f"unknown number format {fmt!r}")
    else:
        rendered = format_number(value)
    return rendered + ("%" if is_percent else "")


def apply_params(template: str, params: Sequence[float] | None) -> str:
    """Substitute ``params`` into the placeholders of ``template``.

    Args:
        template: Template text
        params: Ordered numeric parameters; empty or None leaves the
            template untouched

    Returns:
        The expanded text. Never raises for malformed placeholders.

    Example:
        >>> apply_params("Increases DMG by {0}% for {1} turn(s)", [50, 2])
        'Increases DMG by 50% for 2 turn(s)'
        >>> apply_params("Deals #1[i]% ATK", [1.5])
        'Deals 150% ATK'
    """
    if not template or not params:
        return template

    def repl(match: re.Match[str]) -> str:
        if match.group(1) is not None:
            index = int(match.group(1))
            fmt, is_percent = "", False
        else:
            index = int(match.group(2)) - 1
            fmt, is_percent = match.group(3), bool(match.group(4))
        if index < 0 or index >= len(params):
            return match.group(0)
        try:
            return _render(float(params[index]), fmt, is_percent)
        except (TypeError, ValueError, OverflowError):
            return match.group(0)

    return _PLACEHOLDER_RE.sub(repl, template)


def has_placeholders(text: str) -> bool:
    """Return True when ``text`` still contains a substitution placeholder."""
    return bool(text) and _PLACEHOLDER_RE.search(text) is not None
