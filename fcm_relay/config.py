from __future__ import annotations

import json
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Tuple

from dotenv import load_dotenv
from google.cloud import secretmanager

from fcm_relay.models import ServiceAccountConfig


load_dotenv()

CORS_PROFILES = ("wildcard", "restricted")
DEFAULT_FCM_PROJECT_ID = "puff-push"
DEFAULT_ALLOWED_ORIGINS = ("https://puff.pages.dev",)


@dataclass(frozen=True)
class Config:
    service_account: ServiceAccountConfig
    fcm_project_id: str
    cors_profile: str
    allowed_origins: Tuple[str, ...]
    log_level: str
    firestore_project_id: Optional[str]
    registration_collection: str
    http_timeout: float


def _require(name: str) -> str:
    value = os.getenv(name)
    if not value:
        raise RuntimeError(f"Missing required environment variable: {name}")
    return value


@lru_cache(maxsize=32)
def _access_secret(secret_resource: str) -> str:
    client = secretmanager.SecretManagerServiceClient()
    response = client.access_secret_version(name=secret_resource)
    return response.payload.data.decode("utf-8")


def _resolve_secret(env_value: str) -> str:
    if env_value.startswith("projects/"):
        return _access_secret(env_value)
    return env_value


def parse_service_account(raw: str) -> ServiceAccountConfig:
    try:
        blob = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise RuntimeError("FCM_SERVICE_ACCOUNT is not valid JSON") from exc

    if not isinstance(blob, dict):
        raise RuntimeError("FCM_SERVICE_ACCOUNT must be a JSON object")
    issuer = blob.get("client_email")
    private_key = blob.get("private_key")
    if not issuer or not private_key:
        raise RuntimeError("FCM_SERVICE_ACCOUNT must include client_email and private_key")

    return ServiceAccountConfig(
        issuer=issuer,
        private_key=private_key,
        project_id=blob.get("project_id"),
    )


def _parse_origins(value: Optional[str]) -> Tuple[str, ...]:
    if not value:
        return DEFAULT_ALLOWED_ORIGINS
    origins = tuple(origin.strip() for origin in value.split(",") if origin.strip())
    return origins or DEFAULT_ALLOWED_ORIGINS


@lru_cache(maxsize=1)
def get_config() -> Config:
    service_account = parse_service_account(_resolve_secret(_require("FCM_SERVICE_ACCOUNT")))
    fcm_project_id = (
        os.getenv("FCM_PROJECT_ID") or service_account.project_id or DEFAULT_FCM_PROJECT_ID
    )

    cors_profile = os.getenv("CORS_PROFILE", "wildcard").lower()
    if cors_profile not in CORS_PROFILES:
        raise RuntimeError(f"Unknown CORS_PROFILE: {cors_profile}")
    allowed_origins = _parse_origins(os.getenv("ALLOWED_ORIGINS"))

    log_level = os.getenv("LOG_LEVEL", "INFO")
    firestore_project_id = os.getenv("FIRESTORE_PROJECT_ID")
    registration_collection = os.getenv("REGISTRATION_COLLECTION", "registrations")
    http_timeout = float(os.getenv("HTTP_TIMEOUT_SECONDS", "20"))

    return Config(
        service_account=service_account,
        fcm_project_id=fcm_project_id,
        cors_profile=cors_profile,
        allowed_origins=allowed_origins,
        log_level=log_level,
        firestore_project_id=firestore_project_id,
        registration_collection=registration_collection,
        http_timeout=http_timeout,
    )
