"""
Composition Root
================
Wires the default collaborators for a configuration.
"""

from typing import Optional, Tuple

from .config import StepUpConfig
from .controller import VerificationController
from .gateway.base import SMSGateway
from .gateway.spryng import SpryngGateway
from .otp.engine import OTPEngine
from .otp.hashing import SecretHasher, Argon2SecretHasher
from .process import StepUpFilter
from .state.store import StateStore, InMemoryStateStore


def create_stepup(
    config: StepUpConfig,
    gateway: Optional[SMSGateway] = None,
    store: Optional[StateStore] = None,
    hasher: Optional[SecretHasher] = None,
) -> Tuple[StepUpFilter, VerificationController]:
    """
    Build the processing filter and controller.

    Any collaborator left out gets its default: the Spryng REST gateway,
    an in-memory state store and the Argon2 hasher.
    """
    if gateway is None:
        gateway = SpryngGateway(
            base_url=config.api_base_url,
            route=config.route,
            timeout=config.timeout,
        )
    if store is None:
        store = InMemoryStateStore(ttl_seconds=config.state_ttl)
    if hasher is None:
        hasher = Argon2SecretHasher()

    engine = OTPEngine(gateway=gateway, hasher=hasher, api_key=config.api_key)
    controller = VerificationController(engine=engine, store=store, config=config)
    return StepUpFilter(config, controller), controller
