"""
Shared fixtures for stepup-core tests.
"""

from typing import List, Optional, Dict, Any

import pytest

from stepup_core.config import StepUpConfig
from stepup_core.controller import VerificationController, STATE_NAMESPACE
from stepup_core.gateway.base import SMSGateway, GatewayResponse
from stepup_core.otp.engine import OTPEngine
from stepup_core.otp.hashing import Argon2SecretHasher
from stepup_core.state.store import InMemoryStateStore


class FakeGateway(SMSGateway):
    """Gateway returning a canned response and recording every send."""

    name = "fake"

    def __init__(self, response: Optional[GatewayResponse] = None, error: Optional[Exception] = None):
        self.response = response or GatewayResponse(
            success=True,
            message_id="9dbc5ffb-7524-4fae-9514-51decd94a44f",
            status_code=200,
        )
        self.error = error
        self.sent: List[Dict[str, Any]] = []

    async def send(self, api_key, originator, recipient, body):
        self.sent.append(
            {"api_key": api_key, "originator": originator, "recipient": recipient, "body": body}
        )
        if self.error:
            raise self.error
        return self.response


class FakeClock:
    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def config():
    return StepUpConfig(api_key="secret")


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def hasher():
    return Argon2SecretHasher()


@pytest.fixture
def store():
    return InMemoryStateStore()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def engine(gateway, hasher, config):
    return OTPEngine(gateway=gateway, hasher=hasher, api_key=config.api_key)


@pytest.fixture
def controller(engine, store, config, clock):
    return VerificationController(engine=engine, store=store, config=config, clock=clock)


async def save_state(store, state: Dict[str, Any]) -> str:
    """Persist a raw state mapping under the controller's namespace."""
    return await store.save(state, STATE_NAMESPACE)


