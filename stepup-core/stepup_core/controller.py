"""
Verification Controller
=======================
State machine driving code entry, validation, expiry and resend.

Operations return a continuation value (``Resume``, ``Redirect`` or
``View``) which the transport layer turns into a response.
"""

import time
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, Callable, Union
import structlog

from .config import StepUpConfig
from .exceptions import BadRequest, InvariantError, StateError
from .otp.engine import OTPEngine
from .otp.generator import mask_recipient
from .otp.models import (
    PendingVerification,
    ResendReason,
    Delivered,
    ServerFailure,
    OtherFailure,
)
from .state.store import StateStore

logger = structlog.get_logger(__name__)

STATE_NAMESPACE = "stepup:request"
STATE_PARAM = "AuthState"

SERVER_FAILURE_MESSAGE = "The SMS service is temporarily unavailable. Please try again later."
RESEND_MESSAGES = {
    ResendReason.EXPIRED: "Your verification code has expired.",
    ResendReason.RESEND_REQUESTED: "A new verification code was requested.",
}


@dataclass(frozen=True)
class Resume:
    """Hand control back to the upstream pipeline with its original context."""
    context: Dict[str, Any]


@dataclass(frozen=True)
class Redirect:
    """Send the browser to another step of the flow."""
    target: str
    params: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class View:
    """Render a page; rendering itself is the host's job."""
    template: str
    data: Dict[str, Any] = field(default_factory=dict)


Continuation = Union[Resume, Redirect, View]


class VerificationController:
    """
    Controller for the SMS verification steps.

    Each call loads the pending verification, works on a local copy and
    saves it again under a new identifier when it changes.
    """

    def __init__(
        self,
        engine: OTPEngine,
        store: StateStore,
        config: StepUpConfig,
        clock: Callable[[], float] = time.time,
    ):
        self.engine = engine
        self.store = store
        self.config = config
        self.clock = clock

    async def _load(self, state_id: Optional[str]) -> PendingVerification:
        if not state_id:
            raise BadRequest(f"Missing {STATE_PARAM} parameter.")
        state = await self.store.load(state_id, STATE_NAMESPACE)
        return PendingVerification.from_state(state)

    async def _save(self, pending: PendingVerification) -> str:
        return await self.store.save(pending.to_state(), STATE_NAMESPACE)

    async def enter_code(self, state_id: Optional[str]) -> View:
        """Show the page where the code is entered."""
        await self._load(state_id)
        return View("entercode", {STATE_PARAM: state_id})

    async def validate_code(self, state_id: Optional[str], submitted: Optional[str]) -> Continuation:
        """
        Check a submitted code.

        Returns:
            Resume on a match, Redirect to "resendCode" once the code has
            expired, Redirect back to "enterCode" on a mismatch
        """
        pending = await self._load(state_id)
        if not pending.has_code:
            raise InvariantError("Stored state has no code hash or timestamp.")

        valid_until = pending.sent_at + self.config.valid_until
        if self.clock() > valid_until:
            pending.expired = True
            new_id = await self._save(pending)
            logger.info("Verification code expired", sent_at=pending.sent_at)
            return Redirect("resendCode", {STATE_PARAM: new_id})

        if submitted and self.engine.verify_code(pending.code_hash, submitted):
            logger.info("Verification code accepted")
            return Resume(pending.context)

        logger.info("Verification code rejected")
        return Redirect("enterCode", {STATE_PARAM: state_id})

    async def prompt_resend(self, state_id: Optional[str]) -> View:
        """
        Show why a new code is needed.

        Raises:
            StateError: if no resend reason is recorded
        """
        pending = await self._load(state_id)

        reason = pending.resend_reason()
        if reason is None:
            raise StateError("Resend prompt reached without a reason to resend.")

        if reason is ResendReason.SEND_FAILURE:
            message = pending.send_failure
        else:
            message = RESEND_MESSAGES[reason]

        return View(
            "promptresend",
            {STATE_PARAM: state_id, "reason": reason.value, "message": message},
        )

    async def request_resend(self, state_id: Optional[str]) -> Redirect:
        """Record that the user asked for a new code."""
        pending = await self._load(state_id)
        pending.resend_requested = True
        new_id = await self._save(pending)
        return Redirect("promptResend", {STATE_PARAM: new_id})

    async def send_code(self, state_id: Optional[str]) -> Redirect:
        """
        Generate and send a new code.

        Delivery failures do not raise; they are recorded on the state and
        the user is sent to the resend prompt.
        """
        pending = await self._load(state_id)
        if not pending.recipient or not pending.originator:
            raise InvariantError("Stored state has no recipient or originator.")

        code = self.engine.generate_code()
        outcome = await self.engine.send_code(code, pending.recipient, pending.originator)

        if isinstance(outcome, Delivered):
            logger.info(
                "Message sent successfully",
                message_id=outcome.message_id,
                recipient=mask_recipient(pending.recipient),
            )
            pending.clear_resend_flags()
            pending.code_hash = self.engine.hash_code(code)
            pending.sent_at = int(self.clock())
            new_id = await self._save(pending)
            return Redirect("enterCode", {STATE_PARAM: new_id})

        pending.clear_resend_flags()
        if isinstance(outcome, ServerFailure):
            pending.send_failure = SERVER_FAILURE_MESSAGE
        elif isinstance(outcome, OtherFailure):
            pending.send_failure = (
                "Message could not be delivered (status code %s)." % outcome.status_code
            )

        logger.error(
            "Message could not be sent",
            error=pending.send_failure,
            recipient=mask_recipient(pending.recipient),
            vendor_message=outcome.message,
        )
        new_id = await self._save(pending)
        return Redirect("promptResend", {STATE_PARAM: new_id})
