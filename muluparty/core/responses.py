"""Helpers for building APIResponse bodies."""

from __future__ import annotations

from typing import Any

from flask import jsonify

from .types import APIResponse


def api_success(
    message: str, data: dict[str, Any] | None = None, status: int = 200
) -> Any:
    """A successful response carrying optional data."""
    body: APIResponse = {"success": True, "message": message, "data": data}
    return jsonify(body), status


def api_failure(message: str, status: int = 400) -> Any:
    """A failed response carrying the error descriptor."""
    body: APIResponse = {"success": False, "message": message, "data": None}
    return jsonify(body), status
