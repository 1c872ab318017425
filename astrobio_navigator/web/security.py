# astrobio_navigator/web/security.py

"""
Request guards for the AI routes: an optional shared API key and a
per-client request budget. Each AI request costs at least one Gemini call,
so these routes get the budget while catalog reads stay open.
"""

from __future__ import annotations

import time
from typing import Dict, Optional, Tuple

from fastapi import Header, HTTPException, Request, status

from astrobio_navigator.config.settings import get_settings


def api_key_auth(x_api_key: Optional[str] = Header(default=None, alias="X-API-Key")) -> None:
    """
    Require the X-API-Key header to match ASTROBIO_API_KEY.

    With no key configured every request passes.
    """
    configured = get_settings().API_KEY
    if configured is None:
        return

    if x_api_key != configured.get_secret_value():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing API key.",
        )


# client host -> (window start, requests seen in that window)
_AI_REQUEST_WINDOWS: Dict[str, Tuple[float, int]] = {}


def reset_rate_limits() -> None:
    _AI_REQUEST_WINDOWS.clear()


def rate_limiter(request: Request) -> None:
    """
    Allow at most RATE_LIMIT_MAX_REQUESTS AI requests per client host in
    each RATE_LIMIT_WINDOW_SECONDS window; the rest get 429.

    Counts live in process memory, so the budget is per worker.
    """
    settings = get_settings()
    host = request.client.host if request.client else "unknown"

    now = time.time()
    started, used = _AI_REQUEST_WINDOWS.get(host, (now, 0))
    if now - started >= settings.RATE_LIMIT_WINDOW_SECONDS:
        started, used = now, 0

    used += 1
    if used > settings.RATE_LIMIT_MAX_REQUESTS:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Too many AI requests. Try again later.",
        )

    _AI_REQUEST_WINDOWS[host] = (started, used)
