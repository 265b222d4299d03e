from __future__ import annotations

import logging
from typing import Dict, Optional

from flask import Flask, Response, request

from fcm_relay.config import Config, get_config
from fcm_relay.cors import cors_headers, origin_allowed
from fcm_relay.dispatcher import handle_request
from fcm_relay.logging_config import configure_logging


logger = logging.getLogger(__name__)

TRACE_HEADER = "X-Cloud-Trace-Context"


def _trace_context(header: Optional[str], project_id: str) -> Dict[str, str]:
    # Header format: TRACE_ID/SPAN_ID;o=OPTIONS
    trace_id = (header or "").split("/", 1)[0].strip()
    if not trace_id:
        return {}
    return {"logging.googleapis.com/trace": f"projects/{project_id}/traces/{trace_id}"}


def create_app(config: Optional[Config] = None) -> Flask:
    config = config or get_config()
    configure_logging(config.log_level)

    app = Flask(__name__)

    def _text(body: str, status: int) -> Response:
        origin = request.headers.get("Origin")
        return Response(
            body,
            status=status,
            headers=cors_headers(origin, config),
            mimetype="text/plain",
        )

    @app.get("/health")
    def health() -> tuple[dict, int]:
        return {"status": "ok"}, 200

    @app.route("/", methods=["POST", "OPTIONS"])
    def relay() -> Response:
        origin = request.headers.get("Origin")
        trace_context = _trace_context(request.headers.get(TRACE_HEADER), config.fcm_project_id)
        logger.info(
            "relay.request.received",
            extra={"origin": origin, "method": request.method, **trace_context},
        )

        if not origin_allowed(origin, config):
            logger.warning("relay.request.forbidden", extra={"origin": origin, **trace_context})
            return _text("Forbidden", 403)

        if request.method == "OPTIONS":
            return _text("", 200)

        body = request.get_json(force=True, silent=True)
        try:
            text, status = handle_request(body, config)
        except Exception as exc:  # noqa: BLE001
            logger.exception("relay.request.failed", extra=trace_context)
            return _text(str(exc), 500)

        return _text(text, status)

    return app
