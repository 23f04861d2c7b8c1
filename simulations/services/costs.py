from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from .defaults import HUNDRED, ZERO, optional_decimal, to_decimal
from .projection import WeightProjection


@dataclass(frozen=True)
class CostBreakdown:
    purchase_cost: Decimal
    feed_cost_total: Decimal
    health_cost_total: Decimal
    transport_cost_total: Decimal
    financial_cost_total: Decimal
    depreciation_total: Decimal
    overhead_total: Decimal
    fixed_admin_total: Decimal
    mortality_cost: Decimal

    @property
    def components(self) -> tuple[Decimal, ...]:
        return (
            self.purchase_cost,
            self.feed_cost_total,
            self.health_cost_total,
            self.transport_cost_total,
            self.financial_cost_total,
            self.depreciation_total,
            self.overhead_total,
            self.fixed_admin_total,
            self.mortality_cost,
        )

    @property
    def total_cost(self) -> Decimal:
        return sum(self.components, ZERO)


def compute_purchase_cost(
    projection: WeightProjection,
    *,
    purchase_price_per_at: Any = None,
    purchase_price_per_kg: Any = None,
) -> Decimal:
    """Price of the lean animal; the per-arroba quote wins when both are given."""

    per_at = optional_decimal(purchase_price_per_at)
    if per_at:
        return projection.arrobas_lean * per_at
    per_kg = optional_decimal(purchase_price_per_kg)
    if per_kg:
        return projection.entry_weight_kg * per_kg
    return ZERO


def compute_fixed_admin_total(
    days_on_feed: Any,
    fixed_cost_daily_per_head: Any = None,
    admin_overhead_daily_per_head: Any = None,
) -> Decimal:
    days = to_decimal(days_on_feed)
    if days <= 0:
        return ZERO
    return (to_decimal(fixed_cost_daily_per_head) + to_decimal(admin_overhead_daily_per_head)) * days


def compute_mortality_cost(purchase_cost: Decimal, mortality_pct: Any) -> Decimal:
    # Mortality risk is priced against the purchase value of the animal.
    return purchase_cost * to_decimal(mortality_pct) / HUNDRED


def aggregate_costs(
    *,
    purchase_cost: Decimal,
    feed_cost_total: Decimal,
    fixed_admin_total: Decimal,
    mortality_pct: Any = None,
    health_cost_total: Any = None,
    transport_cost_total: Any = None,
    financial_cost_total: Any = None,
    depreciation_total: Any = None,
    overhead_total: Any = None,
) -> CostBreakdown:
    return CostBreakdown(
        purchase_cost=purchase_cost,
        feed_cost_total=feed_cost_total,
        health_cost_total=to_decimal(health_cost_total),
        transport_cost_total=to_decimal(transport_cost_total),
        financial_cost_total=to_decimal(financial_cost_total),
        depreciation_total=to_decimal(depreciation_total),
        overhead_total=to_decimal(overhead_total),
        fixed_admin_total=fixed_admin_total,
        mortality_cost=compute_mortality_cost(purchase_cost, mortality_pct),
    )
