from __future__ import annotations

from decimal import Decimal
from typing import Any

from pricing.models import Modalidade, PricingMatrixRow, Unit


def create_unit(code: str = "BOI-GO", **extra: Any) -> Unit:
    extra.setdefault("name", "Boitel Goiás")
    extra.setdefault("state", "GO")
    return Unit.objects.create(code=code, **extra)


def row_values(unit: Unit, **overrides: Any) -> dict[str, Any]:
    values: dict[str, Any] = {
        "unit": unit,
        "modalidade": Modalidade.ARROBA_PRODUZIDA,
        "dieta": "Padrão",
        "tipo_animal": "Macho",
        "peso_de_kg": Decimal("300"),
        "peso_ate_kg": Decimal("450"),
        "dias_cocho": 110,
        "gmd_kg_dia": Decimal("1.55"),
        "pct_pv": Decimal("2.4"),
        "pct_rc": Decimal("54"),
        "custo_ms_dia_racao_kg": Decimal("0.48"),
        "tabela_base_r_por_arroba": Decimal("265"),
        "tabela_final_r_por_arroba": Decimal("280"),
    }
    values.update(overrides)
    return values


def create_row(unit: Unit, **overrides: Any) -> PricingMatrixRow:
    return PricingMatrixRow.objects.create(**row_values(unit, **overrides))
