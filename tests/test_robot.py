"""Tests for the robot config store."""

from decimal import Decimal

import pytest

from paperfx.errors import ValidationError
from paperfx.services import robot


VALID_PARAMS = {
    "fastMA": 20,
    "slowMA": 100,
    "rsiPeriod": 9,
    "lotSize": Decimal("0.05"),
    "maxPositions": 3,
    "riskPercent": Decimal("1.5"),
}


class TestDefaults:
    """Tests for the default config."""

    @pytest.mark.asyncio
    async def test_fresh_account_gets_defaults(self, test_session, account):
        """A fresh account reads exactly the documented defaults."""
        settings = await robot.get_config(test_session, account.id)

        assert settings.to_dict() == {
            "fastMA": 50,
            "slowMA": 200,
            "rsiPeriod": 14,
            "lotSize": Decimal("0.01"),
            "maxPositions": 5,
            "riskPercent": Decimal("0.2"),
        }
        assert settings.is_default
        assert settings.created_at is None

    def test_default_constant(self):
        assert robot.RobotSettings.defaults().to_dict() == robot.DEFAULT_ROBOT_CONFIG


class TestSetConfig:
    """Tests for set_config."""

    @pytest.mark.asyncio
    async def test_set_and_get(self, test_session, account):
        saved = await robot.set_config(test_session, account.id, VALID_PARAMS)

        assert saved.to_dict() == VALID_PARAMS
        assert saved.created_at is not None
        assert not saved.is_default

        loaded = await robot.get_config(test_session, account.id)
        assert loaded.to_dict() == VALID_PARAMS

    @pytest.mark.asyncio
    async def test_replaces_wholesale(self, test_session, account):
        """A second write replaces every field and restamps created_at."""
        first = await robot.set_config(test_session, account.id, VALID_PARAMS)

        replacement = {
            "fast_ma": 5,
            "slow_ma": 10,
            "rsi_period": 7,
            "lot_size": "0.1",
            "max_positions": 1,
            "risk_percent": 2,
        }
        second = await robot.set_config(test_session, account.id, replacement)

        assert second.to_dict() == {
            "fastMA": 5,
            "slowMA": 10,
            "rsiPeriod": 7,
            "lotSize": Decimal("0.1"),
            "maxPositions": 1,
            "riskPercent": Decimal("2"),
        }
        assert second.created_at >= first.created_at

    @pytest.mark.asyncio
    async def test_configs_are_per_account(self, test_session, account):
        from paperfx.services import accounts

        other = (await accounts.register(test_session, "Bo", "bo@x.com", "pw")).account
        await robot.set_config(test_session, account.id, VALID_PARAMS)

        assert (await robot.get_config(test_session, other.id)).is_default

    @pytest.mark.asyncio
    @pytest.mark.parametrize("missing", list(VALID_PARAMS))
    async def test_missing_field(self, test_session, account, missing):
        params = {k: v for k, v in VALID_PARAMS.items() if k != missing}
        with pytest.raises(ValidationError, match=missing):
            await robot.set_config(test_session, account.id, params)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "field, value",
        [
            ("fastMA", 0),
            ("slowMA", -200),
            ("lotSize", Decimal("0")),
            ("riskPercent", "-0.2"),
            ("rsiPeriod", 14.5),
            ("maxPositions", "five"),
            ("fastMA", True),
            ("lotSize", None),
            ("fastMA", 10**30),
            ("maxPositions", 2**63),
            ("lotSize", "0.0000000000001"),
        ],
    )
    async def test_invalid_field(self, test_session, account, field, value):
        params = dict(VALID_PARAMS, **{field: value})
        with pytest.raises(ValidationError, match=field):
            await robot.set_config(test_session, account.id, params)

    @pytest.mark.asyncio
    async def test_failed_write_keeps_previous(self, test_session, account):
        await robot.set_config(test_session, account.id, VALID_PARAMS)

        with pytest.raises(ValidationError):
            await robot.set_config(test_session, account.id, dict(VALID_PARAMS, fastMA=0))

        loaded = await robot.get_config(test_session, account.id)
        assert loaded.to_dict() == VALID_PARAMS

    def test_integral_floats_accepted(self):
        cleaned = robot.validate_params(dict(VALID_PARAMS, fastMA=20.0))
        assert cleaned["fast_ma"] == 20
        assert isinstance(cleaned["fast_ma"], int)
