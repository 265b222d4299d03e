from __future__ import annotations

from typing import Dict, Optional

from fcm_relay.config import Config


WILDCARD_HEADERS: Dict[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, HEAD, OPTIONS",
    "Access-Control-Max-Age": "86400",
    "Access-Control-Allow-Headers": (
        "x-worker-key,Content-Type,x-custom-metadata,Content-MD5,x-amz-meta-fileid,"
        "x-amz-meta-account_id,x-amz-meta-clientid,x-amz-meta-file_id,"
        "x-amz-meta-opportunity_id,x-amz-meta-client_id,x-amz-meta-webhook"
    ),
    "Access-Control-Allow-Credentials": "true",
    "Allow": "GET, POST, PUT, DELETE, HEAD, OPTIONS",
}

RESTRICTED_METHODS = "GET,POST,OPTIONS"


def origin_allowed(origin: Optional[str], config: Config) -> bool:
    if config.cors_profile != "restricted":
        return True
    return bool(origin) and origin in config.allowed_origins


def cors_headers(origin: Optional[str], config: Config) -> Dict[str, str]:
    if config.cors_profile != "restricted":
        return dict(WILDCARD_HEADERS)

    allow_origin = origin if origin_allowed(origin, config) else config.allowed_origins[0]
    return {
        "Access-Control-Allow-Origin": allow_origin,
        "Access-Control-Allow-Methods": RESTRICTED_METHODS,
        "Access-Control-Allow-Headers": "*",
        "Vary": "Origin",
    }
