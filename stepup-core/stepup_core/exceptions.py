"""
Step-Up Exceptions
==================
Exception classes for the SMS one-time-password flow.
"""

from typing import Optional, Any


class StepUpError(Exception):
    """Base exception for all step-up authentication errors."""
    status_code: int = 500
    code: str = "STEPUP_ERROR"

    def __init__(self, message: str, details: Any = None):
        self.message = message
        self.details = details
        super().__init__(message)


class ConfigurationError(StepUpError):
    """Raised at startup when the module configuration is missing or invalid."""
    code = "CONFIG_ERROR"


class ValidationError(StepUpError):
    """Raised when a phone number, originator or code has the wrong shape."""
    code = "VALIDATION_ERROR"


class BadRequest(StepUpError):
    """Raised when a required request parameter is missing."""
    status_code = 400
    code = "BAD_REQUEST"


class StateError(StepUpError):
    """Raised when stored state cannot support the requested transition."""
    code = "STATE_ERROR"


class InvariantError(StateError):
    """Raised when stored state or a generated value breaks an invariant."""
    code = "INVARIANT_ERROR"


class StateNotFoundError(StateError):
    """Raised when a state identifier does not resolve to a stored entry."""
    status_code = 400
    code = "STATE_NOT_FOUND"

    def __init__(self, state_id: str, namespace: str):
        self.state_id = state_id
        self.namespace = namespace
        super().__init__(f"State information lost for stage '{namespace}'")


class NoPassiveError(StepUpError):
    """Raised when the upstream request forbids user interaction."""
    code = "NO_PASSIVE"


class DeliveryError(StepUpError):
    """Raised by a gateway when the SMS vendor could not be reached at all."""
    code = "DELIVERY_ERROR"

    def __init__(self, message: str, status_code: Optional[int] = None, details: Any = None):
        super().__init__(message, details=details)
        self.vendor_status = status_code
