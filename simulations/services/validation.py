from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any

from django.core.exceptions import ValidationError

from .calculations import REQUIRED_FIELDS, SimulationInput


@dataclass(frozen=True)
class FieldRange:
    label: str
    minimum: Decimal
    maximum: Decimal
    recommended_min: Decimal | None = None
    recommended_max: Decimal | None = None


def _range(label: str, minimum: str, maximum: str, recommended_min: str | None = None, recommended_max: str | None = None) -> FieldRange:
    return FieldRange(
        label=label,
        minimum=Decimal(minimum),
        maximum=Decimal(maximum),
        recommended_min=Decimal(recommended_min) if recommended_min is not None else None,
        recommended_max=Decimal(recommended_max) if recommended_max is not None else None,
    )


VALIDATION_RANGES: dict[str, FieldRange] = {
    "entry_weight_kg": _range("Peso de entrada", "1", "1000", "200", "400"),
    "days_on_feed": _range("Dias de confinamento", "1", "365", "60", "200"),
    "adg_kg_day": _range("GMD", "0.1", "5", "0.8", "2.0"),
    "dmi_pct_bw": _range("Consumo % PV", "0.5", "10", "1.8", "3.5"),
    "feed_waste_pct": _range("Desperdício de ração", "0", "50", None, "10"),
    "mortality_pct": _range("Mortalidade", "0", "20", None, "5"),
    "selling_price_per_at": _range("Preço de venda (R$/@)", "0.01", "1000", "100", "500"),
    "purchase_price_per_at": _range("Preço de compra (R$/@)", "0.01", "1000", "100", "500"),
    "purchase_price_per_kg": _range("Preço de compra (R$/kg)", "0.01", "100", "5", "25"),
    "feed_cost_kg_dm": _range("Custo da ração (R$/kg MS)", "0.01", "10", "0.3", "2.0"),
}


@dataclass(frozen=True)
class FieldWarning:
    field: str
    message: str


def _as_decimal(value: Any) -> Decimal | None:
    if value in (None, ""):
        return None
    try:
        number = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    return number if number.is_finite() else None


def validate_field(name: str, value: Any) -> tuple[str | None, str | None]:
    """Check one value against its range; returns ``(error, warning)``."""

    field_range = VALIDATION_RANGES.get(name)
    if field_range is None or value in (None, ""):
        return None, None

    number = _as_decimal(value)
    if number is None:
        return f"{field_range.label}: valor numérico inválido.", None

    if number < field_range.minimum or number > field_range.maximum:
        return (
            f"{field_range.label} deve estar entre {field_range.minimum} e {field_range.maximum}.",
            None,
        )

    below = field_range.recommended_min is not None and number < field_range.recommended_min
    above = field_range.recommended_max is not None and number > field_range.recommended_max
    if below or above:
        if field_range.recommended_min is None:
            hint = f"até {field_range.recommended_max}"
        else:
            hint = f"entre {field_range.recommended_min} e {field_range.recommended_max}"
        return None, f"{field_range.label} fora da faixa recomendada ({hint})."
    return None, None


def validate_simulation_input(data: SimulationInput) -> list[FieldWarning]:
    """Validate a simulation before calculating it.

    Raises ``ValidationError`` with a dict of field messages for missing
    required values, a missing purchase price or values outside the hard
    limits. Values that are valid but unusual come back as warnings.
    """

    errors: dict[str, list[str]] = {}
    warnings: list[FieldWarning] = []

    for name in REQUIRED_FIELDS:
        if getattr(data, name) in (None, ""):
            errors.setdefault(name, []).append("Campo obrigatório.")

    has_price_per_at = data.purchase_price_per_at not in (None, "")
    has_price_per_kg = data.purchase_price_per_kg not in (None, "")
    if not has_price_per_at and not has_price_per_kg:
        errors.setdefault("purchase_price_per_at", []).append(
            "Informe o preço de compra por arroba ou por kg."
        )
    elif has_price_per_at and has_price_per_kg:
        warnings.append(
            FieldWarning(
                field="purchase_price_per_kg",
                message="Preço de compra informado por @ e por kg; o preço por @ será utilizado.",
            )
        )

    for name in VALIDATION_RANGES:
        if name in errors:
            continue
        error, warning = validate_field(name, getattr(data, name))
        if error:
            errors.setdefault(name, []).append(error)
        elif warning:
            warnings.append(FieldWarning(field=name, message=warning))

    if errors:
        raise ValidationError(errors)
    return warnings
