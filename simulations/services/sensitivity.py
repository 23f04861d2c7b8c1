from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable, Sequence

from .calculations import SimulationInput, SimulationResult, calculate_simulation
from .defaults import HUNDRED, EngineDefaults, resolve_defaults, to_decimal

DEFAULT_DELTAS: tuple[int, ...] = (-10, -5, 0, 5, 10)
BASELINE_LABEL = "Base"


@dataclass(frozen=True)
class Scenario:
    scenario_label: str
    price_delta: Decimal
    feed_delta: Decimal
    margin: Decimal
    spread: Decimal
    break_even: Decimal
    roi: Decimal

    @property
    def is_baseline(self) -> bool:
        return not self.price_delta and not self.feed_delta


def _format_delta(value: Decimal) -> str:
    text = f"{value.normalize():f}"
    return f"+{text}%" if value > 0 else f"{text}%"


def scenario_label(price_delta: Decimal, feed_delta: Decimal) -> str:
    if not price_delta and not feed_delta:
        return BASELINE_LABEL
    return f"Preço {_format_delta(price_delta)} / Ração {_format_delta(feed_delta)}"


def _apply_delta(value: Any, delta_pct: Decimal) -> Any:
    # A zero delta keeps the original value untouched so the baseline recomputes identically.
    if not delta_pct:
        return value
    return to_decimal(value) * (1 + delta_pct / HUNDRED)


def perturb_input(base_input: SimulationInput, price_delta_pct: Any, feed_delta_pct: Any) -> SimulationInput:
    price_delta = to_decimal(price_delta_pct)
    feed_delta = to_decimal(feed_delta_pct)
    return base_input.with_changes(
        selling_price_per_at=_apply_delta(base_input.selling_price_per_at, price_delta),
        feed_cost_kg_dm=_apply_delta(base_input.feed_cost_kg_dm, feed_delta),
    )


def scenario_from_result(result: SimulationResult, price_delta: Decimal, feed_delta: Decimal) -> Scenario:
    return Scenario(
        scenario_label=scenario_label(price_delta, feed_delta),
        price_delta=price_delta,
        feed_delta=feed_delta,
        margin=result.margin_total,
        spread=result.spread,
        break_even=result.break_even,
        roi=result.roi_pct,
    )


def calculate_sensitivity(
    base_input: SimulationInput,
    price_delta_pct: Any,
    feed_delta_pct: Any,
    *,
    defaults: EngineDefaults | None = None,
) -> Scenario:
    """Re-run the whole simulation with the selling price and feed cost shifted by percentages."""

    price_delta = to_decimal(price_delta_pct)
    feed_delta = to_decimal(feed_delta_pct)
    result = calculate_simulation(
        perturb_input(base_input, price_delta, feed_delta),
        defaults=defaults,
    )
    return scenario_from_result(result, price_delta, feed_delta)


def build_sensitivity_grid(
    base_input: SimulationInput,
    price_deltas: Iterable[Any] = DEFAULT_DELTAS,
    feed_deltas: Iterable[Any] = DEFAULT_DELTAS,
    *,
    defaults: EngineDefaults | None = None,
) -> list[list[Scenario]]:
    """Scenario grid with one row per price delta and one column per feed delta.

    Pass ``feed_deltas=(0,)`` for the single-dimension (price only) grid.
    """

    defaults = resolve_defaults(defaults)
    feed_values = list(feed_deltas)
    return [
        [calculate_sensitivity(base_input, price_delta, feed_delta, defaults=defaults) for feed_delta in feed_values]
        for price_delta in price_deltas
    ]


def flatten_grid(grid: Sequence[Sequence[Scenario]]) -> list[Scenario]:
    return [scenario for row in grid for scenario in row]


def best_scenario(scenarios: Iterable[Scenario]) -> Scenario | None:
    ranked = sorted(scenarios, key=lambda scenario: scenario.roi, reverse=True)
    return ranked[0] if ranked else None


def worst_scenario(scenarios: Iterable[Scenario]) -> Scenario | None:
    ranked = sorted(scenarios, key=lambda scenario: scenario.roi)
    return ranked[0] if ranked else None
