from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any


def format_kg(value: Decimal) -> str:
    return f"{Decimal(value).normalize():f}"


def build_faixa_label(peso_de_kg: Decimal | None, peso_ate_kg: Decimal | None) -> str:
    if peso_de_kg is None and peso_ate_kg is None:
        return "Qualquer peso"
    if peso_de_kg is None:
        return f"Até {format_kg(peso_ate_kg)}kg"
    if peso_ate_kg is None:
        return f"A partir de {format_kg(peso_de_kg)}kg"
    return f"{format_kg(peso_de_kg)}-{format_kg(peso_ate_kg)}kg"


def build_vigencia_label(start_validity: date | None, end_validity: date | None) -> str:
    start = start_validity.strftime("%d/%m/%Y") if start_validity else "Sem início"
    end = end_validity.strftime("%d/%m/%Y") if end_validity else "Sem fim"
    return f"{start} a {end}"


def build_concat_label(row: Any) -> str:
    parts = [
        row.unit_code,
        row.dieta,
        row.tipo_animal,
        build_faixa_label(row.peso_de_kg, row.peso_ate_kg),
        row.modalidade,
    ]
    return " · ".join(str(part).strip() for part in parts if part)
