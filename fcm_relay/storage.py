from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Dict

from google.cloud import firestore

from fcm_relay.config import Config


logger = logging.getLogger(__name__)

REGISTRATION_KEY = "cat"

_client_cache: Dict[str, firestore.Client] = {}


def _get_client(config: Config) -> firestore.Client:
    project_id = config.firestore_project_id or config.fcm_project_id
    if project_id not in _client_cache:
        _client_cache[project_id] = firestore.Client(project=project_id)
    return _client_cache[project_id]


def put(key: str, value: str, config: Config) -> None:
    client = _get_client(config)
    client.collection(config.registration_collection).document(key).set(
        {"value": value, "updated_at": datetime.now(tz=timezone.utc).isoformat()}
    )


def put_registration(registration: str, config: Config) -> None:
    # Single slot: each call overwrites the previous registration.
    put(REGISTRATION_KEY, registration, config)
    logger.info(
        "registration.stored",
        extra={"collection": config.registration_collection, "key": REGISTRATION_KEY},
    )
