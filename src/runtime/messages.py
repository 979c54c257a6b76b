"""Status and notification text builders for the focus panel."""

from __future__ import annotations

from session_clock import ClockSnapshot, Phase

NOTIFICATION_PREFIX = "FocusDev"


def format_duration(seconds: int) -> str:
    """Format a duration in seconds as `MM:SS`."""
    minutes, remainder = divmod(max(0, int(seconds)), 60)
    return f"{minutes:02d}:{remainder:02d}"


def clock_status_message(snapshot: ClockSnapshot) -> str:
    """Build status text for the current clock snapshot."""
    state = "running" if snapshot.running else "paused"
    return (
        f"{snapshot.phase.label} {state} "
        f"({format_duration(snapshot.remaining_seconds)} remaining)"
    )


def session_complete_text(total_sessions: int) -> str:
    """Acknowledgment shown to the user after any phase finishes."""
    return f"{NOTIFICATION_PREFIX}: session complete — total sessions: {total_sessions}"


def next_phase_text(snapshot: ClockSnapshot) -> str:
    if snapshot.phase == Phase.WORK:
        return "Break is over. Time to focus."
    if snapshot.phase == Phase.LONG_BREAK:
        return "Great work. Enjoy a long break."
    return "Nice focus session. Take a short break."
