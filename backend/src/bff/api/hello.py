"""Echo endpoint served behind a project gateway's catch-all proxy.

Every request routed to ``ANY /{proxy+}`` on a project stack lands here.
The handler logs the inbound event and returns it back to the caller
together with a greeting naming the project.
"""

from __future__ import annotations

import os
import time
from typing import Any
from typing import Mapping

from bff.utils.logging import clear_request_context
from bff.utils.logging import configure_logging
from bff.utils.logging import get_logger
from bff.utils.logging import log_lambda_event
from bff.utils.logging import log_response
from bff.utils.logging import set_request_context
from bff.utils.responses import json_response

configure_logging()
logger = get_logger(__name__)


def build_greeting(project_name: str | None) -> str:
    """Return the greeting for ``project_name``."""
    return f"Hello {project_name or 'unknown'}!"


def lambda_handler(event: Mapping[str, Any], context: Any) -> dict[str, Any]:
    """Handle an API Gateway proxy request by echoing the event."""
    start_time = time.perf_counter()
    request_context = event.get("requestContext") or {}
    set_request_context(
        req_id=getattr(context, "aws_request_id", None),
        corr_id=request_context.get("requestId"),
    )

    try:
        log_lambda_event(logger, event)

        body = {
            "message": build_greeting(os.getenv("PROJECT_NAME")),
            "event": dict(event),
        }
        response = json_response(200, body, indent=2)

        log_response(
            logger,
            response["statusCode"],
            duration_ms=(time.perf_counter() - start_time) * 1000,
        )
        return response
    finally:
        clear_request_context()
