"""Terminal formatting for errors raised while handling a request.

Template errors from kida are shown with kida's own compact format.
Everything else is logged with a traceback whose verbosity follows
``AppConfig.traceback_style``:

- ``compact`` (default): application frames only, at most five;
- ``full``: the complete Python traceback;
- ``minimal``: one line with the innermost location.
"""

from __future__ import annotations

import logging
import os
import traceback as _traceback
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from wren.http.request import Request

logger = logging.getLogger("wren.server")

_BANNER_WIDTH = 65
_STDLIB_PREFIX = os.path.dirname(os.__file__)


def _is_kida_error(exc: BaseException) -> bool:
    """Check if an exception originates from the kida template engine."""
    return "kida" in (type(exc).__module__ or "")


def _is_app_frame(filename: str) -> bool:
    """True if the frame is from the application (not stdlib/site-packages)."""
    if "site-packages" in filename or filename.startswith("<"):
        return False
    return not filename.startswith(_STDLIB_PREFIX)


def format_template_error(exc: BaseException, request: Request | None = None) -> str:
    """Kida's compact error wrapped in a banner with the request route."""
    parts = [f"-- Template Error {'-' * (_BANNER_WIDTH - 18)}"]
    if hasattr(exc, "format_compact"):
        parts.append(exc.format_compact())
    else:
        parts.append(str(exc))
    if request is not None:
        parts.append("")
        parts.append(f"  Route: {request.method} {request.path}")
    parts.append("-" * _BANNER_WIDTH)
    return "\n".join(parts)


def format_compact_traceback(exc: BaseException) -> str:
    """Error summary plus the last application frames (or last 3 frames)."""
    frames = _traceback.extract_tb(exc.__traceback__) if exc.__traceback__ else []
    app_frames = [f for f in frames if _is_app_frame(f.filename)]
    display_frames = app_frames or frames[-3:]

    parts = [f"{type(exc).__name__}: {exc}"]
    if display_frames:
        parts.append("  Trace (app frames):")
        for frame in display_frames[-5:]:
            parts.append(f"    {frame.filename}:{frame.lineno} in {frame.name}")
            if frame.line:
                parts.append(f"      {frame.line.strip()}")
    return "\n".join(parts)


def format_minimal_error(exc: BaseException) -> str:
    """One-line error summary with the innermost location."""
    frames = _traceback.extract_tb(exc.__traceback__) if exc.__traceback__ else []
    location = f" at {frames[-1].filename}:{frames[-1].lineno}" if frames else ""
    return f"{type(exc).__name__}{location}: {exc}"


def log_error(
    exc: BaseException,
    request: Request | None = None,
    *,
    style: str = "compact",
) -> None:
    """Log an error raised while handling *request*."""
    prefix = f"500 {request.method} {request.path}" if request is not None else "Server error"

    if _is_kida_error(exc):
        logger.error("%s\n%s", prefix, format_template_error(exc, request))
    elif style == "full":
        logger.error(prefix, exc_info=exc)
    elif style == "minimal":
        logger.error("%s: %s", prefix, format_minimal_error(exc))
    else:
        logger.error("%s\n%s", prefix, format_compact_traceback(exc))
