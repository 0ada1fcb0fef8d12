"""
Step-Up Processing Filter
=========================
Entry point called by the upstream authentication pipeline.
"""

from typing import Dict, Any
import structlog

from .config import StepUpConfig
from .controller import VerificationController, Redirect, STATE_NAMESPACE
from .exceptions import NoPassiveError, ValidationError
from .otp.generator import mask_recipient
from .otp.models import PendingVerification

logger = structlog.get_logger(__name__)


class StepUpFilter:
    """
    Suspends the upstream pipeline until the user enters an SMS code.

    The filter stores the authentication context and sends the first code
    through the same transition used for resends.
    """

    def __init__(self, config: StepUpConfig, controller: VerificationController):
        self.config = config
        self.controller = controller

    def get_mobile_phone_attribute(self, context: Dict[str, Any]) -> str:
        """
        Retrieve the mobile phone number from the context's attributes.

        Raises:
            ValidationError: if the attribute is missing or empty
        """
        attributes = context.get("Attributes") or {}
        values = attributes.get(self.config.mobile_phone_attribute)
        if not values:
            raise ValidationError(
                "Missing attribute '%s', which is needed to send an SMS."
                % self.config.mobile_phone_attribute
            )
        if isinstance(values, str):
            return values
        return values[0]

    async def process(self, context: Dict[str, Any]) -> Redirect:
        """
        Start verification for an authenticated user.

        Args:
            context: Upstream authentication context

        Returns:
            Redirect to the code entry page, or to the resend prompt when
            the first SMS could not be delivered

        Raises:
            NoPassiveError: on a passive request
            ValidationError: if the phone number is missing or malformed
        """
        if context.get("isPassive") is True:
            raise NoPassiveError("Unable to enter verification code on passive request.")

        recipient = self.controller.engine.sanitize_phone_number(
            self.get_mobile_phone_attribute(context)
        )

        pending = PendingVerification(
            context=context,
            recipient=recipient,
            originator=self.config.originator,
        )
        state_id = await self.controller.store.save(pending.to_state(), STATE_NAMESPACE)
        logger.info("Step-up verification started", recipient=mask_recipient(recipient))

        return await self.controller.send_code(state_id)
