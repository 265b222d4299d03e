from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from fcm_relay.config import Config


logger = logging.getLogger(__name__)

FCM_SEND_URL = "https://fcm.googleapis.com/v1/projects/{project_id}/messages:send"
# Body returned to the caller when the send request never completes.
RELAY_FAILURE_TEXT = "undefined"


def send_message(destination: str, message: Any, access_token: Optional[str], config: Config) -> str:
    url = FCM_SEND_URL.format(project_id=config.fcm_project_id)
    payload: Dict[str, Any] = {
        "message": {
            "token": destination,
            "data": {"message": message},
        }
    }
    headers = {
        "Authorization": f"Bearer {access_token}",
        "Content-Type": "application/json",
    }

    try:
        response = requests.post(url, json=payload, headers=headers, timeout=config.http_timeout)
    except requests.RequestException as exc:
        logger.error("fcm.message.failed", exc_info=exc, extra={"project_id": config.fcm_project_id})
        return RELAY_FAILURE_TEXT

    if response.ok:
        logger.info("fcm.message.sent", extra={"status_code": response.status_code})
    else:
        logger.warning(
            "fcm.message.rejected",
            extra={"status_code": response.status_code, "body": response.text},
        )
    return response.text
