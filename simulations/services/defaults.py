from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal, ROUND_HALF_UP
from typing import Any

from django.conf import settings

CENT = Decimal("0.01")
TENTH = Decimal("0.1")
ZERO = Decimal("0")
HUNDRED = Decimal("100")


@dataclass(frozen=True)
class EngineDefaults:
    arroba_kg: Decimal = Decimal("15")
    carcass_yield_pct: Decimal = Decimal("53")
    dmi_pct_bw: Decimal = Decimal("2.5")
    days_per_month: Decimal = Decimal("30")
    strict_matrix_resolution: bool = False

    @classmethod
    def from_settings(cls) -> "EngineDefaults":
        """Build the defaults from ``settings.FEEDLOT_ENGINE``; missing keys keep the class defaults."""

        config = getattr(settings, "FEEDLOT_ENGINE", None) or {}
        base = cls()
        return cls(
            arroba_kg=_config_decimal(config, "ARROBA_KG", base.arroba_kg),
            carcass_yield_pct=_config_decimal(config, "DEFAULT_CARCASS_YIELD_PCT", base.carcass_yield_pct),
            dmi_pct_bw=_config_decimal(config, "DEFAULT_DMI_PCT_BW", base.dmi_pct_bw),
            days_per_month=_config_decimal(config, "DAYS_PER_MONTH", base.days_per_month),
            strict_matrix_resolution=bool(config.get("STRICT_MATRIX_RESOLUTION", base.strict_matrix_resolution)),
        )

    def with_overrides(self, **changes: Any) -> "EngineDefaults":
        converted: dict[str, Any] = {}
        for key, value in changes.items():
            converted[key] = value if key == "strict_matrix_resolution" else to_decimal(value)
        return replace(self, **converted)


def resolve_defaults(defaults: EngineDefaults | None) -> EngineDefaults:
    return defaults if defaults is not None else EngineDefaults.from_settings()


def _config_decimal(config: dict[str, Any], key: str, fallback: Decimal) -> Decimal:
    value = config.get(key)
    if value in (None, ""):
        return fallback
    return to_decimal(value)


def to_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if value is None:
        return ZERO
    if isinstance(value, float):
        # str() keeps the literal the caller typed (0.45 -> "0.45") instead of the binary expansion.
        return Decimal(str(value))
    return Decimal(value)


def optional_decimal(value: Any) -> Decimal | None:
    if value in (None, ""):
        return None
    return to_decimal(value)


def quantize_money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def safe_divide(numerator: Decimal, denominator: Decimal, fallback: Decimal | None = ZERO) -> Decimal | None:
    if not denominator:
        return fallback
    return numerator / denominator
