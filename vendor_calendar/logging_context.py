"""Vendor-scoped logging context.

Provides a vendor-aware logger that attaches the active vendor id to
every log record, so a single vendor's calendar activity can be traced
through the stores and the backend client.

Usage:
    from vendor_calendar.logging_context import get_vendor_logger, set_vendor_id

    set_vendor_id("42")
    logger = get_vendor_logger(__name__)
    logger.info("Refetching availability")  # record.vendor_id == "42"
"""

import logging
from contextvars import ContextVar

_vendor_id: ContextVar[str] = ContextVar("vendor_id", default="SELF")


def set_vendor_id(vendor_id: str) -> None:
    """Set the vendor id for the current async context."""
    _vendor_id.set(vendor_id)


def get_vendor_id() -> str:
    """Retrieve the current vendor id."""
    return _vendor_id.get()


class VendorIdFilter(logging.Filter):
    """Injects vendor_id into every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.vendor_id = _vendor_id.get()  # type: ignore[attr-defined]
        return True


def get_vendor_logger(name: str) -> logging.Logger:
    """Return a logger with the VendorIdFilter attached.

    The filter adds ``vendor_id`` to each record so formatters can
    include ``%(vendor_id)s`` in their format string.
    """
    logger = logging.getLogger(name)
    if not any(isinstance(f, VendorIdFilter) for f in logger.filters):
        logger.addFilter(VendorIdFilter())
    return logger
