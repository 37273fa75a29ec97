"""Robot config store - one strategy-parameter record per account."""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from paperfx.database import utcnow
from paperfx.errors import ValidationError
from paperfx.models import RobotConfig
from paperfx.money import to_decimal

# Returned for accounts that never saved a config
DEFAULT_ROBOT_CONFIG = {
    "fastMA": 50,
    "slowMA": 200,
    "rsiPeriod": 14,
    "lotSize": Decimal("0.01"),
    "maxPositions": 5,
    "riskPercent": Decimal("0.2"),
}

# Wire key -> attribute name
FIELD_NAMES = {
    "fastMA": "fast_ma",
    "slowMA": "slow_ma",
    "rsiPeriod": "rsi_period",
    "lotSize": "lot_size",
    "maxPositions": "max_positions",
    "riskPercent": "risk_percent",
}

INTEGER_FIELDS = {"fastMA", "slowMA", "rsiPeriod", "maxPositions"}


@dataclass
class RobotSettings:
    """Robot parameters as seen by callers, stored or defaulted."""

    fast_ma: int
    slow_ma: int
    rsi_period: int
    lot_size: Decimal
    max_positions: int
    risk_percent: Decimal
    created_at: datetime | None = None

    @property
    def is_default(self) -> bool:
        return self.created_at is None

    def to_dict(self) -> dict:
        """Wire representation keyed by the camelCase field names."""
        return {key: getattr(self, attr) for key, attr in FIELD_NAMES.items()}

    @classmethod
    def from_model(cls, config: RobotConfig) -> "RobotSettings":
        return cls(
            fast_ma=config.fast_ma,
            slow_ma=config.slow_ma,
            rsi_period=config.rsi_period,
            lot_size=config.lot_size,
            max_positions=config.max_positions,
            risk_percent=config.risk_percent,
            created_at=config.created_at,
        )

    @classmethod
    def defaults(cls) -> "RobotSettings":
        return cls(**{FIELD_NAMES[k]: v for k, v in DEFAULT_ROBOT_CONFIG.items()})


def validate_params(params: Mapping) -> dict:
    """Check all six robot fields and convert them to their stored types.

    Accepts the camelCase wire keys or the snake_case attribute names.

    Returns:
        Dict keyed by attribute name

    Raises:
        ValidationError: If a field is missing, non-numeric, not positive or
            out of range (see paperfx.money)
    """
    cleaned = {}
    for key, attr in FIELD_NAMES.items():
        if key in params:
            raw = params[key]
        elif attr in params:
            raw = params[attr]
        else:
            raise ValidationError(f"{key} is required")

        value = to_decimal(raw, key)
        if value <= 0:
            raise ValidationError(f"{key} must be greater than 0")

        if key in INTEGER_FIELDS:
            if value != value.to_integral_value():
                raise ValidationError(f"{key} must be an integer")
            cleaned[attr] = int(value)
        else:
            cleaned[attr] = value
    return cleaned


async def get_config(session: AsyncSession, account_id: str) -> RobotSettings:
    """Get the account's robot config, or the defaults if none was saved."""
    result = await session.execute(
        select(RobotConfig).where(RobotConfig.account_id == account_id)
    )
    config = result.scalar_one_or_none()
    if config is None:
        return RobotSettings.defaults()
    return RobotSettings.from_model(config)


async def set_config(
    session: AsyncSession, account_id: str, params: Mapping
) -> RobotSettings:
    """Replace the account's robot config.

    Every field is overwritten and created_at restamped; nothing from the
    previous config survives.

    Raises:
        ValidationError: If params are incomplete or invalid
    """
    cleaned = validate_params(params)

    result = await session.execute(
        select(RobotConfig)
        .where(RobotConfig.account_id == account_id)
        .execution_options(populate_existing=True)
    )
    config = result.scalar_one_or_none()
    if config is None:
        config = RobotConfig(account_id=account_id, **cleaned)
        session.add(config)
    else:
        for attr, value in cleaned.items():
            setattr(config, attr, value)
    config.created_at = utcnow()

    await session.commit()
    return RobotSettings.from_model(config)
