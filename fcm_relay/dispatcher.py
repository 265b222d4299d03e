from __future__ import annotations

import logging
from typing import Any, Tuple

from fcm_relay.config import Config
from fcm_relay.models import Action, InboundRequest
from fcm_relay.relay import send_message
from fcm_relay.storage import put_registration
from fcm_relay.tokens import mint_access_token


logger = logging.getLogger(__name__)

STORE_ACK = "donezo"


class BadRequest(ValueError):
    pass


def _present(value: Any) -> bool:
    # Empty objects and arrays still count as supplied; only null, false, 0 and "" do not.
    if isinstance(value, (dict, list)):
        return True
    return bool(value)


def _dispatch(body: Any, config: Config) -> str:
    if not _present(body):
        raise BadRequest("Body must be json.")

    # Minted before the body is validated, so every parsable request costs one exchange.
    access_token = mint_access_token(config.service_account, timeout=config.http_timeout)

    inbound = InboundRequest.from_body(body if isinstance(body, dict) else {})
    if not _present(inbound.registration):
        raise BadRequest("Body must include a registration token.")

    if inbound.action is Action.RELAY_MESSAGE:
        if not _present(inbound.message):
            raise BadRequest("Body did not include a message.")
        result = send_message(inbound.registration, inbound.message, access_token, config)
        logger.info("relay.message.result", extra={"result": result})
        return result

    if inbound.action is Action.STORE_REGISTRATION:
        put_registration(inbound.registration, config)
        return STORE_ACK

    raise BadRequest("No valid action in body.")


def handle_request(body: Any, config: Config) -> Tuple[str, int]:
    """Route a parsed request body to the relay or registration path.

    Returns the plain-text response body and status. TokenExchangeError is
    left to the caller.
    """
    try:
        return _dispatch(body, config), 200
    except BadRequest as exc:
        logger.info("relay.request.rejected", extra={"reason": str(exc)})
        return str(exc), 400
