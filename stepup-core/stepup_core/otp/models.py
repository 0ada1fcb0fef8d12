"""
OTP Models
==========
Data models for pending verifications and SMS delivery outcomes.
"""

import copy
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, Union
from enum import Enum


# Keys used inside the opaque state entry
RECIPIENT_KEY = "stepup:recipient"
ORIGINATOR_KEY = "stepup:originator"
HASH_KEY = "stepup:hash"
TIMESTAMP_KEY = "stepup:timestamp"
EXPIRED_KEY = "stepup:expired"
SEND_FAILURE_KEY = "stepup:sendFailure"
RESEND_REQUESTED_KEY = "stepup:resendRequested"

BOOKKEEPING_KEYS = (
    RECIPIENT_KEY,
    ORIGINATOR_KEY,
    HASH_KEY,
    TIMESTAMP_KEY,
    EXPIRED_KEY,
    SEND_FAILURE_KEY,
    RESEND_REQUESTED_KEY,
)


class ResendReason(str, Enum):
    """Why the user ended up on the resend prompt."""
    EXPIRED = "expired"
    SEND_FAILURE = "sendFailure"
    RESEND_REQUESTED = "resendRequested"


@dataclass
class PendingVerification:
    """
    A verification in progress.

    Wraps the upstream authentication context together with the OTP
    bookkeeping. Only ``to_state`` / ``from_state`` know the stored layout.
    """
    context: Dict[str, Any] = field(default_factory=dict)
    recipient: Optional[str] = None
    originator: Optional[str] = None
    code_hash: Optional[str] = None
    sent_at: Optional[int] = None
    expired: bool = False
    send_failure: Optional[str] = None
    resend_requested: bool = False

    @property
    def has_code(self) -> bool:
        return self.code_hash is not None and self.sent_at is not None

    def resend_reason(self) -> Optional[ResendReason]:
        """Return the highest priority resend reason that is set."""
        if self.expired:
            return ResendReason.EXPIRED
        if self.send_failure:
            return ResendReason.SEND_FAILURE
        if self.resend_requested:
            return ResendReason.RESEND_REQUESTED
        return None

    def clear_resend_flags(self) -> None:
        self.expired = False
        self.send_failure = None
        self.resend_requested = False

    @classmethod
    def from_state(cls, state: Dict[str, Any]) -> "PendingVerification":
        """Build a verification from a stored state mapping."""
        data = copy.deepcopy(state)
        sent_at = data.pop(TIMESTAMP_KEY, None)

        return cls(
            recipient=data.pop(RECIPIENT_KEY, None),
            originator=data.pop(ORIGINATOR_KEY, None),
            code_hash=data.pop(HASH_KEY, None),
            sent_at=int(sent_at) if sent_at is not None else None,
            expired=bool(data.pop(EXPIRED_KEY, False)),
            send_failure=data.pop(SEND_FAILURE_KEY, None),
            resend_requested=bool(data.pop(RESEND_REQUESTED_KEY, False)),
            context=data,
        )

    def to_state(self) -> Dict[str, Any]:
        """Serialize back into the flat mapping kept by the state store."""
        state = copy.deepcopy(self.context)
        values = {
            RECIPIENT_KEY: self.recipient,
            ORIGINATOR_KEY: self.originator,
            HASH_KEY: self.code_hash,
            TIMESTAMP_KEY: self.sent_at,
            SEND_FAILURE_KEY: self.send_failure,
        }
        for key, value in values.items():
            if value is not None:
                state[key] = value

        if self.expired:
            state[EXPIRED_KEY] = True
        if self.resend_requested:
            state[RESEND_REQUESTED_KEY] = True

        return state


@dataclass(frozen=True)
class Delivered:
    """The vendor accepted the message."""
    message_id: Optional[str]


@dataclass(frozen=True)
class ServerFailure:
    """The vendor failed on its side (5xx or unreachable)."""
    message: Optional[str] = None


@dataclass(frozen=True)
class OtherFailure:
    """The vendor rejected the message for any other reason."""
    status_code: Optional[int]
    message: Optional[str] = None


DeliveryOutcome = Union[Delivered, ServerFailure, OtherFailure]
