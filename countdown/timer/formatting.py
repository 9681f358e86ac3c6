"""Human-readable renderings of a duration in seconds."""

from __future__ import annotations


MENU_BAR_PLACEHOLDER = "--:--"


def _split(seconds: float) -> tuple[int, int, int, int]:
    total = max(0, int(seconds))
    days, rest = divmod(total, 86400)
    hours, rest = divmod(rest, 3600)
    minutes, secs = divmod(rest, 60)
    return days, hours, minutes, secs


def format_duration(seconds: float) -> str:
    """Compact form, e.g. ``"1d 2h 3m 4s"``.  Zero parts are left out."""
    days, hours, minutes, secs = _split(seconds)
    parts: list[str] = []
    if days:
        parts.append(f"{days}d")
    if hours:
        parts.append(f"{hours}h")
    if minutes:
        parts.append(f"{minutes}m")
    if secs or not parts:
        parts.append(f"{secs}s")
    return " ".join(parts)


def format_clock(seconds: float) -> str:
    """Large-display form: ``"01 h 02 m 03 s"`` / ``"02 m 03 s"`` / ``"03 s"``.

    Days are folded into the hour count.
    """
    days, hours, minutes, secs = _split(seconds)
    hours += days * 24
    if hours > 0:
        return f"{hours:02d} h {minutes:02d} m {secs:02d} s"
    if minutes > 0:
        return f"{minutes:02d} m {secs:02d} s"
    return f"{secs:02d} s"


def format_menu_bar(seconds: float) -> str:
    if seconds > 0:
        return format_duration(seconds)
    return MENU_BAR_PLACEHOLDER
