from __future__ import annotations

import logging
from dataclasses import dataclass, fields, replace
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from django.core.exceptions import ValidationError

from .costs import (
    aggregate_costs,
    compute_fixed_admin_total,
    compute_purchase_cost,
)
from .defaults import (
    HUNDRED,
    TENTH,
    ZERO,
    EngineDefaults,
    quantize_money,
    resolve_defaults,
    safe_divide,
    to_decimal,
)
from .dre import (
    FeedlotCostsPerHead,
    FeedlotDRE,
    NegotiationContext,
    RancherDRE,
    build_feedlot_dre,
    build_rancher_dre,
    compute_service_revenue,
    resolve_deal,
)
from .projection import compute_feed_cost_total, estimate_daily_intake, project_weights

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = (
    "entry_weight_kg",
    "days_on_feed",
    "adg_kg_day",
    "selling_price_per_at",
    "feed_cost_kg_dm",
)


@dataclass(frozen=True)
class SimulationInput:
    entry_weight_kg: Any
    days_on_feed: Any
    adg_kg_day: Any
    selling_price_per_at: Any
    feed_cost_kg_dm: Any
    dmi_pct_bw: Any = None
    dmi_kg_day: Any = None
    mortality_pct: Any = 0
    feed_waste_pct: Any = 0
    purchase_price_per_at: Any = None
    purchase_price_per_kg: Any = None
    health_cost_total: Any = 0
    transport_cost_total: Any = 0
    financial_cost_total: Any = 0
    depreciation_total: Any = 0
    overhead_total: Any = 0
    fixed_cost_daily_per_head: Any = None
    admin_overhead_daily_per_head: Any = None
    carcass_yield_pct: Any = None
    use_average_weight: bool = True
    negotiation: NegotiationContext | None = None

    def with_changes(self, **changes: Any) -> "SimulationInput":
        return replace(self, **changes)


@dataclass(frozen=True)
class SimulationResult:
    exit_weight_kg: Decimal
    carcass_weight_kg: Decimal
    arrobas_hook: Decimal
    arrobas_gain: Decimal
    arrobas_lean: Decimal
    dmi_kg_day_calculated: Decimal

    purchase_cost: Decimal
    feed_cost_total: Decimal
    health_cost_total: Decimal
    transport_cost_total: Decimal
    financial_cost_total: Decimal
    depreciation_total: Decimal
    overhead_total: Decimal
    fixed_admin_total: Decimal
    mortality_cost: Decimal
    total_cost: Decimal

    revenue: Decimal

    margin_total: Decimal
    cost_per_animal: Decimal
    cost_per_arroba: Decimal
    spread: Decimal
    break_even: Decimal
    roi_pct: Decimal
    payback_days: Decimal | None

    dre_pecuarista: RancherDRE | None = None
    dre_jbs: FeedlotDRE | None = None

    def as_dict(self) -> dict[str, Any]:
        return {field.name: getattr(self, field.name) for field in fields(self)}


def ensure_required_fields(data: SimulationInput) -> None:
    missing = {
        name: ["Campo obrigatório."]
        for name in REQUIRED_FIELDS
        if getattr(data, name) in (None, "")
    }
    if missing:
        raise ValidationError(missing)


def calculate_simulation(
    data: SimulationInput,
    *,
    defaults: EngineDefaults | None = None,
) -> SimulationResult:
    """Run the full per-animal economics of a feedlot simulation.

    Values are carried at full precision and rounded to cents only when they
    are placed in the result. ``total_cost`` is the sum of the rounded
    components and ``margin_total`` is ``revenue - total_cost`` on the
    rounded figures, so both identities hold exactly on the result.

    DRE sub-objects are only built when the negotiation resolves into a
    complete deal; otherwise they are ``None``.
    """

    ensure_required_fields(data)
    defaults = resolve_defaults(defaults)

    projection = project_weights(
        data.entry_weight_kg,
        data.adg_kg_day,
        data.days_on_feed,
        data.carcass_yield_pct,
        defaults=defaults,
    )
    dmi = estimate_daily_intake(
        projection,
        dmi_kg_day=data.dmi_kg_day,
        dmi_pct_bw=data.dmi_pct_bw,
        use_average_weight=data.use_average_weight,
        defaults=defaults,
    )
    feed_cost_total = compute_feed_cost_total(dmi, data.days_on_feed, data.feed_cost_kg_dm, data.feed_waste_pct)
    purchase_cost = compute_purchase_cost(
        projection,
        purchase_price_per_at=data.purchase_price_per_at,
        purchase_price_per_kg=data.purchase_price_per_kg,
    )
    fixed_admin_total = compute_fixed_admin_total(
        data.days_on_feed,
        data.fixed_cost_daily_per_head,
        data.admin_overhead_daily_per_head,
    )
    costs = aggregate_costs(
        purchase_cost=purchase_cost,
        feed_cost_total=feed_cost_total,
        fixed_admin_total=fixed_admin_total,
        mortality_pct=data.mortality_pct,
        health_cost_total=data.health_cost_total,
        transport_cost_total=data.transport_cost_total,
        financial_cost_total=data.financial_cost_total,
        depreciation_total=data.depreciation_total,
        overhead_total=data.overhead_total,
    )
    selling_price = to_decimal(data.selling_price_per_at)

    rounded_components = [quantize_money(value) for value in costs.components]
    total_cost = sum(rounded_components, ZERO)
    revenue = quantize_money(projection.arrobas_hook * selling_price)
    margin = revenue - total_cost

    cost_per_arroba = safe_divide(total_cost, projection.arrobas_hook)
    days = to_decimal(data.days_on_feed)
    payback_days = None
    if margin > 0 and days > 0:
        payback_days = (total_cost / (margin / days)).quantize(TENTH, rounding=ROUND_HALF_UP)

    dre_pecuarista, dre_jbs = _build_dres(data, projection, costs, dmi, defaults)

    return SimulationResult(
        exit_weight_kg=quantize_money(projection.exit_weight_kg),
        carcass_weight_kg=quantize_money(projection.carcass_weight_kg),
        arrobas_hook=quantize_money(projection.arrobas_hook),
        arrobas_gain=quantize_money(projection.arrobas_gain),
        arrobas_lean=quantize_money(projection.arrobas_lean),
        dmi_kg_day_calculated=quantize_money(dmi),
        purchase_cost=rounded_components[0],
        feed_cost_total=rounded_components[1],
        health_cost_total=rounded_components[2],
        transport_cost_total=rounded_components[3],
        financial_cost_total=rounded_components[4],
        depreciation_total=rounded_components[5],
        overhead_total=rounded_components[6],
        fixed_admin_total=rounded_components[7],
        mortality_cost=rounded_components[8],
        total_cost=total_cost,
        revenue=revenue,
        margin_total=margin,
        cost_per_animal=total_cost,
        cost_per_arroba=quantize_money(cost_per_arroba),
        spread=quantize_money(selling_price - cost_per_arroba),
        break_even=quantize_money(cost_per_arroba),
        roi_pct=quantize_money(safe_divide(margin * HUNDRED, total_cost)),
        payback_days=payback_days,
        dre_pecuarista=dre_pecuarista,
        dre_jbs=dre_jbs,
    )


def _build_dres(data, projection, costs, dmi, defaults) -> tuple[RancherDRE | None, FeedlotDRE | None]:
    deal = resolve_deal(data.negotiation)
    if deal is None:
        if data.negotiation is not None:
            logger.debug("Simulação calculada sem DRE: negociação incompleta.")
        return None, None

    service_ph = compute_service_revenue(
        deal.modalidade,
        deal.service_price,
        arrobas_gain=projection.arrobas_gain,
        days_on_feed=data.days_on_feed,
    )
    lean_price = deal.lean_price_per_at
    if lean_price is None:
        lean_price = _purchase_price_per_at(data, defaults)

    pecuarista = build_rancher_dre(
        projection=projection,
        deal=deal,
        fat_price_per_at=data.selling_price_per_at,
        lean_price_per_at=lean_price,
        service_revenue_per_head=service_ph,
        days_on_feed=data.days_on_feed,
        defaults=defaults,
    )

    if deal.feedlot_freight_total is not None:
        freight = deal.feedlot_freight_total / deal.head_count
    else:
        freight = costs.transport_cost_total
    jbs = build_feedlot_dre(
        projection=projection,
        deal=deal,
        costs=FeedlotCostsPerHead(
            feed_cost=costs.feed_cost_total,
            freight=freight,
            sanitary_mortality=costs.health_cost_total + costs.mortality_cost,
            fixed_overhead=costs.fixed_admin_total + costs.overhead_total,
            depreciation=costs.depreciation_total,
            financial=costs.financial_cost_total,
            other_costs=deal.other_costs_total / deal.head_count,
        ),
        service_revenue_per_head=service_ph,
        dmi_kg_day=dmi,
        days_on_feed=data.days_on_feed,
    )
    return pecuarista, jbs


def _purchase_price_per_at(data: SimulationInput, defaults: EngineDefaults) -> Decimal:
    per_at = to_decimal(data.purchase_price_per_at)
    if per_at:
        return per_at
    return to_decimal(data.purchase_price_per_kg) * defaults.arroba_kg
