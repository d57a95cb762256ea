"""Utility modules for the backend application."""

from bff.utils.responses import json_response
from bff.utils.logging import (
    configure_logging,
    get_logger,
    set_request_context,
    clear_request_context,
)

__all__ = [
    "clear_request_context",
    "configure_logging",
    "get_logger",
    "json_response",
    "set_request_context",
]
