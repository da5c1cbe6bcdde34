# travelhub/utils/responses.py
"""모든 API 응답이 공유하는 {success, data, message?, ...} 봉투(envelope) 형식."""
from typing import Any, Optional

from flask import jsonify


def api_response(data: Any = None, message: Optional[str] = None, status: int = 200, **extra):
    body = {"success": True}
    if data is not None:
        body["data"] = data
    if message:
        body["message"] = message
    body.update(extra)
    return jsonify(body), status


def error_response(error_code: str, message: str, status: int, details: Any = None):
    body = {"success": False, "error_code": error_code, "message": message}
    if details is not None:
        body["details"] = details
    return jsonify(body), status
