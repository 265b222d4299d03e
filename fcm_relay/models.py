from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class Action(str, Enum):
    RELAY_MESSAGE = "relay_message"
    STORE_REGISTRATION = "store_registration"


@dataclass(frozen=True)
class ServiceAccountConfig:
    issuer: str
    private_key: str
    project_id: Optional[str] = None


@dataclass
class InboundRequest:
    registration: Optional[str]
    action: Optional[Action]
    message: Optional[Any] = None

    @classmethod
    def from_body(cls, body: Dict[str, Any]) -> "InboundRequest":
        try:
            action: Optional[Action] = Action(body.get("action"))
        except ValueError:
            action = None
        return cls(
            registration=body.get("registration"),
            action=action,
            message=body.get("message"),
        )
