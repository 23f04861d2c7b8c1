from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from django.db import models

from .defaults import HUNDRED, ZERO, EngineDefaults, optional_decimal, resolve_defaults, to_decimal

TWO = Decimal("2")


class ScaleType(models.TextChoices):
    FAZENDA = "Fazenda", "Fazenda"
    BALANCAO = "Balanção", "Balanção"
    BALANCINHA = "Balancinha", "Balancinha"


@dataclass(frozen=True)
class WeightProjection:
    entry_weight_kg: Decimal
    exit_weight_kg: Decimal
    carcass_weight_kg: Decimal
    arrobas_hook: Decimal
    arrobas_gain: Decimal
    arrobas_lean: Decimal

    @property
    def average_weight_kg(self) -> Decimal:
        return (self.entry_weight_kg + self.exit_weight_kg) / TWO


def project_weights(
    entry_weight_kg: Any,
    adg_kg_day: Any,
    days_on_feed: Any,
    carcass_yield_pct: Any = None,
    *,
    defaults: EngineDefaults | None = None,
) -> WeightProjection:
    """Project exit and carcass weights plus arroba quantities for one animal."""

    defaults = resolve_defaults(defaults)
    entry = to_decimal(entry_weight_kg)
    days = to_decimal(days_on_feed)
    gain_kg = to_decimal(adg_kg_day) * days if days > 0 else ZERO
    exit_weight = entry + gain_kg

    yield_pct = optional_decimal(carcass_yield_pct)
    if yield_pct is None:
        yield_pct = defaults.carcass_yield_pct
    carcass = exit_weight * yield_pct / HUNDRED

    return WeightProjection(
        entry_weight_kg=entry,
        exit_weight_kg=exit_weight,
        carcass_weight_kg=carcass,
        arrobas_hook=carcass / defaults.arroba_kg,
        arrobas_gain=(exit_weight - entry) / defaults.arroba_kg,
        arrobas_lean=entry / defaults.arroba_kg,
    )


def estimate_daily_intake(
    projection: WeightProjection,
    *,
    dmi_kg_day: Any = None,
    dmi_pct_bw: Any = None,
    use_average_weight: bool = True,
    defaults: EngineDefaults | None = None,
) -> Decimal:
    """Dry-matter intake in kg/day; a direct value wins over the %PV estimate."""

    direct = optional_decimal(dmi_kg_day)
    if direct is not None:
        return direct

    defaults = resolve_defaults(defaults)
    pct = optional_decimal(dmi_pct_bw)
    if pct is None:
        pct = defaults.dmi_pct_bw
    base_weight = projection.average_weight_kg if use_average_weight else projection.exit_weight_kg
    return base_weight * pct / HUNDRED


def compute_feed_cost_total(
    dmi_kg_day: Decimal,
    days_on_feed: Any,
    feed_cost_kg_dm: Any,
    feed_waste_pct: Any = None,
) -> Decimal:
    days = to_decimal(days_on_feed)
    if days <= 0:
        return ZERO
    waste_factor = 1 + to_decimal(feed_waste_pct) / HUNDRED
    return dmi_kg_day * days * to_decimal(feed_cost_kg_dm) * waste_factor


def effective_entry_weight(
    scale_type: str | None,
    *,
    peso_fazenda_kg: Any = None,
    peso_balancao_kg: Any = None,
    peso_balancinha_kg: Any = None,
    quebra_fazenda_pct: Any = None,
    quebra_balanca_pct: Any = None,
) -> Decimal:
    """Entry weight used by the feedlot, after the shrinkage of the weighing point.

    Farm weighings lose ``quebra_fazenda_pct`` on the way to the feedlot; the
    large feedlot scale (balanção) loses ``quebra_balanca_pct`` before the
    pen scale (balancinha), which is taken as-is.
    """

    if scale_type == ScaleType.FAZENDA:
        return to_decimal(peso_fazenda_kg) * (1 - to_decimal(quebra_fazenda_pct) / HUNDRED)
    if scale_type == ScaleType.BALANCAO:
        return to_decimal(peso_balancao_kg) * (1 - to_decimal(quebra_balanca_pct) / HUNDRED)
    if scale_type == ScaleType.BALANCINHA:
        return to_decimal(peso_balancinha_kg)
    return ZERO


def project_scale_weights(
    peso_fazenda_kg: Any,
    quebra_fazenda_pct: Any = None,
    quebra_balanca_pct: Any = None,
) -> dict[str, Decimal]:
    """Expected balanção and balancinha readings for a farm weighing."""

    balancao = to_decimal(peso_fazenda_kg) * (1 - to_decimal(quebra_fazenda_pct) / HUNDRED)
    balancinha = balancao * (1 - to_decimal(quebra_balanca_pct) / HUNDRED)
    return {
        "peso_balancao_kg": balancao,
        "peso_balancinha_kg": balancinha,
    }
