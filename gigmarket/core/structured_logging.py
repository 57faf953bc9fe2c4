"""Structured logging helpers."""

import logging
from typing import Any

from gigmarket.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging() -> None:
    """Configure root logging once at app startup."""
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format=LOG_FORMAT,
    )


def build_log_context(
    *,
    user_id: str | None = None,
    order_id: str | None = None,
    request_id: str | None = None,
    route: str | None = None,
    method: str | None = None,
) -> dict[str, Any]:
    """Return a log context dict for ``extra=``. Never includes message bodies."""
    context: dict[str, Any] = {}
    if user_id:
        context["user_id"] = user_id
    if order_id:
        context["order_id"] = order_id
    if request_id:
        context["request_id"] = request_id
    if route:
        context["route"] = route
    if method:
        context["method"] = method
    return context
