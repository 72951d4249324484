"""Warning and closing comment bodies.

WARNING_MARKER is the contract between the comments the bot posts and the
classifier that finds them later: a comment counts as a retention warning
only if its body contains this exact string. Every rendered warning is
guaranteed to contain it.
"""

from datetime import datetime

from qa_retention.utils import ensure_utc, format_hours

WARNING_MARKER = "QA Instance Retention Warning"
WARNING_HEADER = f"⚠️ **{WARNING_MARKER}**"

DEFAULT_WARNING_TEMPLATE = (
    f"{WARNING_HEADER}\n\n"
    "QA instance inactive for {retention_hours} hours.\n\n"
    'Add any comment (e.g. "bump") to keep open, or it will auto-close in {inactivity_hours} hours.'
)


def is_warning_body(body: str | None) -> bool:
    """True if a comment body carries the warning marker."""
    return bool(body) and WARNING_MARKER in body


def render_warning_message(template: str, retention_hours: float, inactivity_hours: float) -> str:
    """Fill {retention_hours} and {inactivity_hours} in template.

    Only these two placeholders are replaced; any other braces are kept
    as written. The warning header is prepended when the template does not
    already contain the marker.
    """
    body = template.replace("{retention_hours}", format_hours(retention_hours)).replace(
        "{inactivity_hours}", format_hours(inactivity_hours)
    )
    if not is_warning_body(body):
        body = f"{WARNING_HEADER}\n\n{body}"
    return body


def render_close_message(last_human_activity: datetime, inactivity_hours: float) -> str:
    """Closing comment explaining why the QA instance was auto-closed."""
    since = ensure_utc(last_human_activity).isoformat().replace("+00:00", "Z")
    return (
        f"🔒 Auto-closed: No activity since {since}\n\n"
        f"This QA instance exceeded the {format_hours(inactivity_hours)}h inactivity threshold "
        "after receiving a warning.\n"
        "If you need this instance again, please reopen the issue and add a comment explaining why."
    )
