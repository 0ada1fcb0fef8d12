"""
Tests for the upstream processing filter.
"""

from types import SimpleNamespace

import pytest

from stepup_core.controller import STATE_NAMESPACE, Resume
from stepup_core.exceptions import NoPassiveError, ValidationError
from stepup_core.gateway.base import GatewayResponse
from stepup_core.otp.models import HASH_KEY, RECIPIENT_KEY, ORIGINATOR_KEY, SEND_FAILURE_KEY
from stepup_core.factory import create_stepup
from stepup_core.config import StepUpConfig
from stepup_core.state import store as store_module

from conftest import FakeClock, FakeGateway


@pytest.fixture
def stepup(config, gateway, store, hasher):
    step_filter, _ = create_stepup(config, gateway=gateway, store=store, hasher=hasher)
    return step_filter


class TestStepUpFilter:

    @pytest.mark.asyncio
    async def test_passive_request(self, stepup, gateway):
        """Passive requests cannot prompt for a code."""
        with pytest.raises(NoPassiveError):
            await stepup.process({"isPassive": True, "Attributes": {"mobile": ["+31612345678"]}})

        assert gateway.sent == []

    @pytest.mark.asyncio
    async def test_missing_attribute(self, stepup):
        with pytest.raises(ValidationError, match="Missing attribute 'mobile'"):
            await stepup.process({"Attributes": {"uid": ["jdoe"]}})

    @pytest.mark.asyncio
    async def test_malformed_number(self, stepup, gateway):
        with pytest.raises(ValidationError):
            await stepup.process({"Attributes": {"mobile": ["call me"]}})

        assert gateway.sent == []

    @pytest.mark.asyncio
    async def test_sends_first_code(self, stepup, gateway, store):
        """Should send a code to the sanitized number and ask for it."""
        context = {"Attributes": {"mobile": ["+31-612345678"], "uid": ["jdoe"]}}

        result = await stepup.process(context)

        assert result.target == "enterCode"
        assert gateway.sent[0]["recipient"] == "31612345678"
        assert gateway.sent[0]["originator"] == "Spryng SMS"

        state = await store.load(result.params["AuthState"], STATE_NAMESPACE)
        assert state[RECIPIENT_KEY] == "31612345678"
        assert state[ORIGINATOR_KEY] == "Spryng SMS"
        assert HASH_KEY in state
        assert state["Attributes"] == context["Attributes"]

    @pytest.mark.asyncio
    async def test_custom_attribute(self, gateway, store, hasher):
        from stepup_core.config import StepUpConfig

        config = StepUpConfig(api_key="secret", mobile_phone_attribute="telephoneNumber")
        step_filter, _ = create_stepup(config, gateway=gateway, store=store, hasher=hasher)

        await step_filter.process({"Attributes": {"telephoneNumber": ["0612345678"]}})

        assert gateway.sent[0]["recipient"] == "612345678"

    @pytest.mark.asyncio
    async def test_first_send_fails(self, config, store, hasher):
        """A failed first send goes to the resend prompt."""
        gateway = FakeGateway(GatewayResponse(success=False, server_error=True, status_code=500))
        step_filter, _ = create_stepup(config, gateway=gateway, store=store, hasher=hasher)

        result = await step_filter.process({"Attributes": {"mobile": ["+31612345678"]}})

        assert result.target == "promptResend"
        state = await store.load(result.params["AuthState"], STATE_NAMESPACE)
        assert SEND_FAILURE_KEY in state

    @pytest.mark.asyncio
    async def test_long_lived_code_outlives_default_store(self, monkeypatch, gateway, hasher):
        """A code valid for two hours still resumes after the store's default hour."""
        clock = FakeClock()
        monkeypatch.setattr(store_module, "time", SimpleNamespace(time=clock))
        config = StepUpConfig.from_mapping({"apiKey": "secret", "validUntil": 7200})
        step_filter, controller = create_stepup(config, gateway=gateway, hasher=hasher)
        controller.clock = clock

        result = await step_filter.process({"Attributes": {"mobile": ["+31612345678"]}})
        clock.now += 4000

        outcome = await controller.validate_code(result.params["AuthState"], gateway.sent[0]["body"])

        assert isinstance(outcome, Resume)
