"""Service-account access tokens for the FCM v1 API.

A JWT assertion is signed with the service account's private key and traded
for a bearer token through the OAuth2 JWT-bearer grant. Tokens are minted
fresh on every call and never cached.
"""
from __future__ import annotations

import logging
import time
from typing import Any, Dict, Optional

import jwt
import requests

from fcm_relay.models import ServiceAccountConfig


logger = logging.getLogger(__name__)

TOKEN_URL = "https://www.googleapis.com/oauth2/v4/token"
MESSAGING_SCOPE = "https://www.googleapis.com/auth/firebase.messaging"
JWT_BEARER_GRANT = "urn:ietf:params:oauth:grant-type:jwt-bearer"
TOKEN_LIFETIME_SECONDS = 3600


class TokenExchangeError(RuntimeError):
    def __init__(self, status_text: str, status_code: Optional[int] = None) -> None:
        super().__init__(f"Failed to retrieve token: {status_text}")
        self.status_text = status_text
        self.status_code = status_code


def build_assertion(service_account: ServiceAccountConfig, now: Optional[int] = None) -> str:
    issued_at = int(time.time()) if now is None else now
    claims: Dict[str, Any] = {
        "iss": service_account.issuer,
        "scope": MESSAGING_SCOPE,
        "aud": TOKEN_URL,
        "iat": issued_at,
        "exp": issued_at + TOKEN_LIFETIME_SECONDS,
    }
    return jwt.encode(claims, service_account.private_key, algorithm="RS256")


def mint_access_token(service_account: ServiceAccountConfig, timeout: float = 20) -> Optional[str]:
    """Exchange a freshly signed assertion for a bearer token.

    Raises TokenExchangeError when the token endpoint answers with a non-2xx
    status. The ``access_token`` field of a successful response is returned
    as-is, so a malformed response yields ``None``.
    """
    assertion = build_assertion(service_account)
    response = requests.post(
        TOKEN_URL,
        data={"grant_type": JWT_BEARER_GRANT, "assertion": assertion},
        headers={"Content-Type": "application/x-www-form-urlencoded"},
        timeout=timeout,
    )
    if not response.ok:
        logger.error(
            "token.exchange.failed",
            extra={"status_code": response.status_code, "reason": response.reason},
        )
        raise TokenExchangeError(response.reason, response.status_code)

    data = response.json()
    if not isinstance(data, dict):
        return None
    return data.get("access_token")
