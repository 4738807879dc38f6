# Overview: Uniform JSON envelope shared by successes and failures.

"""
Every response body has the same shape:

    {"status": 200, "message": "...", "timestamp": "2026-01-01T00:00:00Z", <payload>}

The payload is operation-specific (a single entity, a list, pagination
counters, a token) and keys whose value is None are omitted, so a failure
envelope carries no payload at all.
"""

from __future__ import annotations

from stockledger.time_utils import to_utc_z, utcnow


def envelope(status: int, message: str, **payload) -> tuple[dict, int]:
    body = {
        "status": status,
        "message": message,
        "timestamp": to_utc_z(utcnow()),
    }
    for key, value in payload.items():
        if value is not None:
            body[key] = value
    return body, status


def ok(message: str = "success", **payload) -> tuple[dict, int]:
    return envelope(200, message, **payload)
