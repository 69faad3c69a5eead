from __future__ import annotations

from flask import get_flashed_messages, jsonify


def json_response(payload: dict, status: int = 200):
    """JSON body plus the notices flashed while handling the request."""
    body = dict(payload)
    body["messages"] = [[category, text] for category, text in get_flashed_messages(with_categories=True)]
    return jsonify(body), status
