from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Iterable, Sequence

from django.core.exceptions import ValidationError

from simulations.services.defaults import to_decimal

NEG_INF = Decimal("-Infinity")
POS_INF = Decimal("Infinity")

KEY_FIELDS = ("unit_code", "modalidade", "dieta", "tipo_animal")


@dataclass(frozen=True)
class OverlapConflict:
    row_id: Any
    concat_label: str
    peso_de_kg: Decimal | None
    peso_ate_kg: Decimal | None
    start_validity: date | None
    end_validity: date | None

    @property
    def message(self) -> str:
        return (
            f"Conflito com a linha #{self.row_id} ({self.concat_label}): "
            "faixa de peso e vigência se sobrepõem."
        )


class OverlapConflictError(ValidationError):
    """Raised when a pricing row collides with an existing row of the same key."""

    def __init__(self, conflicts: Sequence[OverlapConflict]) -> None:
        self.conflicts = list(conflicts)
        super().__init__([conflict.message for conflict in self.conflicts], code="overlap")


def matrix_key(row: Any) -> tuple[str, str, str, str]:
    return tuple(str(getattr(row, field) or "").strip() for field in KEY_FIELDS)  # type: ignore[return-value]


def weight_bounds(row: Any) -> tuple[Decimal, Decimal]:
    lower = row.peso_de_kg if row.peso_de_kg is not None else NEG_INF
    upper = row.peso_ate_kg if row.peso_ate_kg is not None else POS_INF
    return to_decimal(lower), to_decimal(upper)


def validity_bounds(row: Any) -> tuple[date, date]:
    return row.start_validity or date.min, row.end_validity or date.max


def weight_windows_overlap(candidate: Any, existing: Any) -> bool:
    # Half-open windows: [300, 450) and [450, 600) only touch.
    new_min, new_max = weight_bounds(candidate)
    existing_min, existing_max = weight_bounds(existing)
    return new_max > existing_min and new_min < existing_max


def validity_windows_overlap(candidate: Any, existing: Any) -> bool:
    new_start, new_end = validity_bounds(candidate)
    existing_start, existing_end = validity_bounds(existing)
    return new_end >= existing_start and new_start <= existing_end


def _row_id(row: Any) -> Any:
    pk = getattr(row, "pk", None)
    return pk if pk is not None else getattr(row, "id", None)


def _is_active(row: Any) -> bool:
    return bool(getattr(row, "is_active", True))


def validate_overlap(candidate: Any, existing_rows: Iterable[Any]) -> list[OverlapConflict]:
    """Return the rows that collide with ``candidate`` on weight AND validity.

    Rows with a different categorical key, inactive rows and the candidate
    itself (same primary key) never conflict.
    """

    if not _is_active(candidate):
        return []

    candidate_key = matrix_key(candidate)
    candidate_id = _row_id(candidate)
    conflicts: list[OverlapConflict] = []
    for row in existing_rows:
        row_id = _row_id(row)
        if candidate_id is not None and row_id == candidate_id:
            continue
        if not _is_active(row) or matrix_key(row) != candidate_key:
            continue
        if weight_windows_overlap(candidate, row) and validity_windows_overlap(candidate, row):
            conflicts.append(
                OverlapConflict(
                    row_id=row_id,
                    concat_label=getattr(row, "concat_label", "") or "",
                    peso_de_kg=row.peso_de_kg,
                    peso_ate_kg=row.peso_ate_kg,
                    start_validity=row.start_validity,
                    end_validity=row.end_validity,
                )
            )
    return conflicts


def ensure_no_overlap(candidate: Any, existing_rows: Iterable[Any]) -> None:
    conflicts = validate_overlap(candidate, existing_rows)
    if conflicts:
        raise OverlapConflictError(conflicts)
