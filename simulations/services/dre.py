from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from pricing.models import Modalidade

from .defaults import (
    HUNDRED,
    ZERO,
    EngineDefaults,
    optional_decimal,
    quantize_money,
    resolve_defaults,
    safe_divide,
    to_decimal,
)
from .projection import (
    WeightProjection,
    compute_feed_cost_total,
    effective_entry_weight,
    estimate_daily_intake,
    project_weights,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NegotiationContext:
    """Commercial terms agreed with the rancher, as typed by the user.

    Any field may be missing; :func:`resolve_deal` decides whether the terms
    are complete enough to build the income statements.
    """

    modalidade: str | None = None
    service_price: Any = None
    head_count: int | None = None
    lean_price_per_at: Any = None
    agio_r: Any = None
    lean_yield_pct: Any = None
    quebra_fazenda_pct: Any = None
    quebra_balanca_pct: Any = None
    feedlot_freight_total: Any = None
    rancher_freight_total: Any = None
    abattoir_fee_total: Any = None
    icms_return_total: Any = None
    other_costs_total: Any = None


@dataclass(frozen=True)
class Deal:
    """A complete negotiation: known modality, positive head count and service price."""

    modalidade: str
    service_price: Decimal
    head_count: int
    lean_price_per_at: Decimal | None
    agio_r: Decimal
    lean_yield_pct: Decimal | None
    feedlot_freight_total: Decimal | None
    rancher_freight_total: Decimal
    abattoir_fee_total: Decimal
    icms_return_total: Decimal
    other_costs_total: Decimal


def _whole_head_count(value: Any) -> int | None:
    # Fractional, non-finite or non-positive head counts leave the deal incomplete.
    count = optional_decimal(value)
    if count is None or not count.is_finite() or count <= 0 or count != count.to_integral_value():
        return None
    return int(count)


def resolve_deal(negotiation: NegotiationContext | None, *, service_price: Any = None) -> Deal | None:
    """Turn loose negotiation data into a :class:`Deal`, or ``None`` when incomplete.

    ``service_price`` is the price resolved from the rate card; a price typed
    into the negotiation takes precedence over it.
    """

    if negotiation is None:
        return None

    modalidade = negotiation.modalidade
    if modalidade not in Modalidade.values:
        logger.debug("Negociação sem modalidade válida (%r); DRE omitida.", modalidade)
        return None

    head_count = _whole_head_count(negotiation.head_count)
    price = optional_decimal(negotiation.service_price)
    if price is None:
        price = optional_decimal(service_price)
    if head_count is None or price is None or price <= 0:
        logger.debug(
            "Negociação incompleta (cabeças=%s, preço=%s); DRE omitida.",
            negotiation.head_count,
            price,
        )
        return None

    return Deal(
        modalidade=modalidade,
        service_price=price,
        head_count=head_count,
        lean_price_per_at=optional_decimal(negotiation.lean_price_per_at),
        agio_r=to_decimal(negotiation.agio_r),
        lean_yield_pct=optional_decimal(negotiation.lean_yield_pct),
        feedlot_freight_total=optional_decimal(negotiation.feedlot_freight_total),
        rancher_freight_total=to_decimal(negotiation.rancher_freight_total),
        abattoir_fee_total=to_decimal(negotiation.abattoir_fee_total),
        icms_return_total=to_decimal(negotiation.icms_return_total),
        other_costs_total=to_decimal(negotiation.other_costs_total),
    )


def compute_service_revenue(
    modalidade: str | None,
    service_price: Any,
    *,
    arrobas_gain: Decimal,
    days_on_feed: Any,
) -> Decimal:
    """Service charged per head: per arroba gained or per day on feed."""

    price = to_decimal(service_price)
    if modalidade == Modalidade.ARROBA_PRODUZIDA:
        return arrobas_gain * price
    if modalidade == Modalidade.DIARIA:
        days = to_decimal(days_on_feed)
        return days * price if days > 0 else ZERO
    return ZERO


def lean_arrobas(projection: WeightProjection, lean_yield_pct: Decimal | None, defaults: EngineDefaults) -> Decimal:
    """Arrobas the lean animal is bought on; a lean yield prices it on carcass equivalent."""

    if lean_yield_pct:
        return projection.entry_weight_kg * lean_yield_pct / HUNDRED / defaults.arroba_kg
    return projection.arrobas_lean


@dataclass(frozen=True)
class RancherDRE:
    head_count: int
    arrobas_hook: Decimal
    arrobas_lean: Decimal
    arrobas_gain: Decimal
    fat_price_per_at: Decimal
    lean_price_per_at: Decimal
    agio_r: Decimal
    revenue: Decimal
    cost_lean: Decimal
    cost_fattening: Decimal
    abattoir_fee: Decimal
    rancher_freight: Decimal
    icms_return: Decimal
    fees_total: Decimal
    result_per_lot: Decimal
    revenue_per_head: Decimal
    cost_lean_per_head: Decimal
    cost_fattening_per_head: Decimal
    fees_per_head: Decimal
    result_per_head: Decimal
    cost_per_arroba_produced: Decimal
    result_per_arroba_lean: Decimal
    monthly_return_pct: Decimal

    @property
    def result(self) -> Decimal:
        return self.result_per_lot


@dataclass(frozen=True)
class FeedlotDRE:
    head_count: int
    days_on_feed: Decimal
    dmi_kg_day: Decimal
    revenue: Decimal
    feed_cost: Decimal
    freight: Decimal
    sanitary_mortality: Decimal
    fixed_overhead: Decimal
    depreciation: Decimal
    financial: Decimal
    other_costs: Decimal
    total_cost: Decimal
    result_jbs: Decimal
    revenue_per_head: Decimal
    feed_cost_per_head: Decimal
    total_cost_per_head: Decimal
    result_per_head: Decimal
    result_per_arroba: Decimal


def build_rancher_dre(
    *,
    projection: WeightProjection,
    deal: Deal,
    fat_price_per_at: Any,
    lean_price_per_at: Any,
    service_revenue_per_head: Decimal,
    days_on_feed: Any,
    defaults: EngineDefaults | None = None,
) -> RancherDRE:
    """Rancher income statement.

    Revenue and animal costs are rounded per head and multiplied by the head
    count; flat fees stay exact lot totals and their per-head share is rounded.
    """

    defaults = resolve_defaults(defaults)
    qty = deal.head_count
    fat_price = to_decimal(fat_price_per_at)
    lean_price = to_decimal(lean_price_per_at)
    lean_at = lean_arrobas(projection, deal.lean_yield_pct, defaults)

    revenue_ph = quantize_money(projection.arrobas_hook * fat_price)
    cost_lean_ph = quantize_money(lean_at * lean_price + deal.agio_r)
    fattening_ph = quantize_money(service_revenue_per_head)

    abattoir_lot = quantize_money(deal.abattoir_fee_total)
    freight_lot = quantize_money(deal.rancher_freight_total)
    icms_lot = quantize_money(deal.icms_return_total)
    fees_lot = abattoir_lot + freight_lot + icms_lot

    revenue_lot = revenue_ph * qty
    cost_lean_lot = cost_lean_ph * qty
    fattening_lot = fattening_ph * qty
    result_lot = revenue_lot - cost_lean_lot - fattening_lot - fees_lot
    spent_lot = cost_lean_lot + fattening_lot + fees_lot
    gain_lot = projection.arrobas_gain * qty
    lean_lot = lean_at * qty

    days = to_decimal(days_on_feed)
    monthly_return = ZERO
    if days > 0 and cost_lean_lot > 0:
        monthly_return = result_lot / cost_lean_lot * (defaults.days_per_month / days) * HUNDRED

    return RancherDRE(
        head_count=qty,
        arrobas_hook=quantize_money(projection.arrobas_hook * qty),
        arrobas_lean=quantize_money(lean_lot),
        arrobas_gain=quantize_money(gain_lot),
        fat_price_per_at=fat_price,
        lean_price_per_at=lean_price,
        agio_r=deal.agio_r,
        revenue=revenue_lot,
        cost_lean=cost_lean_lot,
        cost_fattening=fattening_lot,
        abattoir_fee=abattoir_lot,
        rancher_freight=freight_lot,
        icms_return=icms_lot,
        fees_total=fees_lot,
        result_per_lot=result_lot,
        revenue_per_head=revenue_ph,
        cost_lean_per_head=cost_lean_ph,
        cost_fattening_per_head=fattening_ph,
        fees_per_head=quantize_money(fees_lot / qty),
        result_per_head=quantize_money(result_lot / qty),
        cost_per_arroba_produced=quantize_money(safe_divide(spent_lot, gain_lot)),
        result_per_arroba_lean=quantize_money(safe_divide(result_lot, lean_lot)),
        monthly_return_pct=quantize_money(monthly_return),
    )


@dataclass(frozen=True)
class FeedlotCostsPerHead:
    feed_cost: Decimal
    freight: Decimal
    sanitary_mortality: Decimal
    fixed_overhead: Decimal
    depreciation: Decimal
    financial: Decimal
    other_costs: Decimal


def build_feedlot_dre(
    *,
    projection: WeightProjection,
    deal: Deal,
    costs: FeedlotCostsPerHead,
    service_revenue_per_head: Decimal,
    dmi_kg_day: Decimal,
    days_on_feed: Any,
) -> FeedlotDRE:
    qty = deal.head_count
    revenue_ph = quantize_money(service_revenue_per_head)
    feed_ph = quantize_money(costs.feed_cost)
    freight_ph = quantize_money(costs.freight)
    sanitary_ph = quantize_money(costs.sanitary_mortality)
    fixed_ph = quantize_money(costs.fixed_overhead)
    depreciation_ph = quantize_money(costs.depreciation)
    financial_ph = quantize_money(costs.financial)
    other_ph = quantize_money(costs.other_costs)
    total_ph = feed_ph + freight_ph + sanitary_ph + fixed_ph + depreciation_ph + financial_ph + other_ph
    result_ph = revenue_ph - total_ph
    result_lot = result_ph * qty

    return FeedlotDRE(
        head_count=qty,
        days_on_feed=to_decimal(days_on_feed),
        dmi_kg_day=quantize_money(dmi_kg_day),
        revenue=revenue_ph * qty,
        feed_cost=feed_ph * qty,
        freight=freight_ph * qty,
        sanitary_mortality=sanitary_ph * qty,
        fixed_overhead=fixed_ph * qty,
        depreciation=depreciation_ph * qty,
        financial=financial_ph * qty,
        other_costs=other_ph * qty,
        total_cost=total_ph * qty,
        result_jbs=result_lot,
        revenue_per_head=revenue_ph,
        feed_cost_per_head=feed_ph,
        total_cost_per_head=total_ph,
        result_per_head=result_ph,
        result_per_arroba=quantize_money(safe_divide(result_lot, projection.arrobas_gain * qty)),
    )


@dataclass(frozen=True)
class MatrixSuggestions:
    """Parameters suggested by a resolved pricing row."""

    dias_cocho: int | None = None
    gmd_kg_dia: Decimal | None = None
    pct_pv: Decimal | None = None
    consumo_ms_kg_dia: Decimal | None = None
    pct_rc: Decimal | None = None
    custo_ms_total: Decimal | None = None
    custo_ms_dia_racao_kg: Decimal | None = None
    service_price: Decimal | None = None
    service_price_base: Decimal | None = None
    concat_label: str = ""
    matched_row_id: int | None = None
    ctr_r: Decimal | None = None
    cf_r: Decimal | None = None
    corp_r: Decimal | None = None
    depr_r: Decimal | None = None
    fin_r: Decimal | None = None
    custo_fixo_outros_r: Decimal | None = None
    sanitario_pct: Decimal | None = None
    mortes_pct: Decimal | None = None
    rejeito_pct: Decimal | None = None


@dataclass(frozen=True)
class MatrixDREInputs:
    suggestions: MatrixSuggestions
    negotiation: NegotiationContext
    fat_price_per_at: Any
    scale_type: str | None = None
    peso_fazenda_kg: Any = None
    peso_balancao_kg: Any = None
    peso_balancinha_kg: Any = None
    entry_weight_kg: Any = None


@dataclass(frozen=True)
class MatrixDREResult:
    pecuarista: RancherDRE
    boitel: FeedlotDRE


def _matrix_entry_weight(inputs: MatrixDREInputs) -> Decimal:
    direct = optional_decimal(inputs.entry_weight_kg)
    if direct is not None:
        return direct
    return effective_entry_weight(
        inputs.scale_type,
        peso_fazenda_kg=inputs.peso_fazenda_kg,
        peso_balancao_kg=inputs.peso_balancao_kg,
        peso_balancinha_kg=inputs.peso_balancinha_kg,
        quebra_fazenda_pct=inputs.negotiation.quebra_fazenda_pct,
        quebra_balanca_pct=inputs.negotiation.quebra_balanca_pct,
    )


def calculate_matrix_driven_dre(
    inputs: MatrixDREInputs,
    *,
    defaults: EngineDefaults | None = None,
) -> MatrixDREResult | None:
    """Both income statements driven by a rate-card row's suggested parameters.

    Returns ``None`` when the negotiation is incomplete (no head count, no
    known modality or no service price).
    """

    defaults = resolve_defaults(defaults)
    suggestions = inputs.suggestions
    deal = resolve_deal(inputs.negotiation, service_price=suggestions.service_price)
    if deal is None:
        return None

    days = to_decimal(suggestions.dias_cocho)
    projection = project_weights(
        _matrix_entry_weight(inputs),
        suggestions.gmd_kg_dia,
        days,
        suggestions.pct_rc,
        defaults=defaults,
    )
    dmi = estimate_daily_intake(
        projection,
        dmi_kg_day=suggestions.consumo_ms_kg_dia,
        dmi_pct_bw=suggestions.pct_pv,
        defaults=defaults,
    )
    service_ph = compute_service_revenue(
        deal.modalidade,
        deal.service_price,
        arrobas_gain=projection.arrobas_gain,
        days_on_feed=days,
    )
    lean_price = deal.lean_price_per_at or ZERO

    pecuarista = build_rancher_dre(
        projection=projection,
        deal=deal,
        fat_price_per_at=inputs.fat_price_per_at,
        lean_price_per_at=lean_price,
        service_revenue_per_head=service_ph,
        days_on_feed=days,
        defaults=defaults,
    )

    lean_value_ph = lean_arrobas(projection, deal.lean_yield_pct, defaults) * lean_price
    risk_pct = to_decimal(suggestions.sanitario_pct) + to_decimal(suggestions.mortes_pct)
    costs = FeedlotCostsPerHead(
        feed_cost=compute_feed_cost_total(dmi, days, suggestions.custo_ms_dia_racao_kg, suggestions.rejeito_pct),
        freight=to_decimal(deal.feedlot_freight_total) / deal.head_count,
        sanitary_mortality=lean_value_ph * risk_pct / HUNDRED,
        fixed_overhead=to_decimal(suggestions.ctr_r) + to_decimal(suggestions.cf_r) + to_decimal(suggestions.corp_r),
        depreciation=to_decimal(suggestions.depr_r),
        financial=to_decimal(suggestions.fin_r),
        other_costs=to_decimal(suggestions.custo_fixo_outros_r) + deal.other_costs_total / deal.head_count,
    )
    boitel = build_feedlot_dre(
        projection=projection,
        deal=deal,
        costs=costs,
        service_revenue_per_head=service_ph,
        dmi_kg_day=dmi,
        days_on_feed=days,
    )
    return MatrixDREResult(pecuarista=pecuarista, boitel=boitel)
