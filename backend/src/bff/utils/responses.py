"""Shared response utilities for Lambda handlers."""

from __future__ import annotations

import json
from dataclasses import asdict
from typing import Any
from typing import Optional


def get_security_headers() -> dict[str, str]:
    """Get security headers for all responses.

    SECURITY: These headers protect against common web vulnerabilities:
    - X-Content-Type-Options: Prevents MIME type sniffing
    - X-Frame-Options: Prevents clickjacking
    - Cache-Control: Prevents caching of echoed request data

    Returns:
        Dictionary of security headers.
    """
    return {
        "X-Content-Type-Options": "nosniff",
        "X-Frame-Options": "DENY",
        "Cache-Control": "no-store, no-cache, must-revalidate",
        "Pragma": "no-cache",
    }


def json_response(
    status_code: int,
    body: Any,
    headers: Optional[dict[str, str]] = None,
    indent: Optional[int] = None,
) -> dict[str, Any]:
    """Create a JSON API Gateway proxy response.

    CORS headers are deliberately absent: the gateway only adds them on
    remote proxy routes.

    Args:
        status_code: HTTP status code.
        body: Response body (dict or dataclass).
        headers: Optional additional headers to include.
        indent: Optional JSON indentation for the serialized body.

    Returns:
        API Gateway response dictionary.
    """
    response_headers = {
        "Content-Type": "application/json",
    }
    response_headers.update(get_security_headers())

    if headers:
        response_headers.update(headers)

    payload = _serialize_body(body)

    return {
        "statusCode": status_code,
        "headers": response_headers,
        "body": json.dumps(payload, default=str, indent=indent),
    }


def _serialize_body(body: Any) -> Any:
    """Serialize response body to JSON-compatible format."""
    if hasattr(body, "__dataclass_fields__"):
        return asdict(body)

    return body
