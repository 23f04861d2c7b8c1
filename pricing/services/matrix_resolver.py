from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from typing import Any, Iterable, Sequence

from django.utils import timezone

from pricing.models import Modalidade, PricingMatrixRow, PricingMatrixRowQuerySet
from pricing.services.overlap import OverlapConflict, matrix_key, validate_overlap
from simulations.services.defaults import EngineDefaults, resolve_defaults, to_decimal
from simulations.services.dre import MatrixSuggestions

logger = logging.getLogger(__name__)


class NoPriceFound(Exception):
    """No active pricing row covers the requested key, weight and date."""

    def __init__(self, lookup: "MatrixLookup") -> None:
        self.lookup = lookup
        super().__init__(
            "Nenhuma linha da matriz de preços para "
            f"{lookup.unit_code} · {lookup.dieta} · {lookup.tipo_animal} · {lookup.modalidade} "
            f"com {lookup.entry_weight_kg} kg em {lookup.date_ref:%d/%m/%Y}."
        )


class AmbiguousMatrixMatch(Exception):
    """More than one active pricing row matches a lookup (strict resolution only)."""

    def __init__(self, lookup: "MatrixLookup", row_ids: Sequence[Any]) -> None:
        self.lookup = lookup
        self.row_ids = list(row_ids)
        super().__init__(
            f"{len(self.row_ids)} linhas da matriz atendem à mesma consulta: "
            + ", ".join(f"#{row_id}" for row_id in self.row_ids)
        )


@dataclass(frozen=True)
class MatrixLookup:
    unit_code: str
    modalidade: str
    dieta: str
    tipo_animal: str
    entry_weight_kg: Any
    date_ref: date

    def as_filters(self) -> dict[str, str]:
        return {
            "unit_code": self.unit_code.strip(),
            "modalidade": self.modalidade,
            "dieta": self.dieta.strip(),
            "tipo_animal": self.tipo_animal.strip(),
        }


def candidate_rows(lookup: MatrixLookup, queryset: PricingMatrixRowQuerySet | None = None) -> PricingMatrixRowQuerySet:
    queryset = queryset if queryset is not None else PricingMatrixRow.objects.all()
    return (
        queryset.active()
        .for_key(**lookup.as_filters())
        .containing(entry_weight_kg=to_decimal(lookup.entry_weight_kg), date_ref=lookup.date_ref)
        .in_resolution_order()
    )


def select_matrix_row(
    lookup: MatrixLookup,
    candidates: Sequence[PricingMatrixRow],
    *,
    strict: bool = False,
) -> PricingMatrixRow | None:
    """Pick the first candidate; more than one is logged, or raised in strict mode."""

    if not candidates:
        return None
    if len(candidates) > 1:
        row_ids = [row.pk for row in candidates]
        if strict:
            raise AmbiguousMatrixMatch(lookup, row_ids)
        logger.warning(
            "Consulta ambígua na matriz de preços (%s): linhas %s; usando #%s.",
            " · ".join(lookup.as_filters().values()),
            row_ids,
            row_ids[0],
        )
    return candidates[0]


def resolve_matrix_row(
    unit_code: str,
    modalidade: str,
    dieta: str,
    tipo_animal: str,
    entry_weight_kg: Any,
    date_ref: date | None = None,
    *,
    defaults: EngineDefaults | None = None,
) -> PricingMatrixRow | None:
    """Find the active pricing row for a key at a given entry weight and date.

    ``date_ref`` defaults to today. Returns ``None`` when no row applies.
    """

    defaults = resolve_defaults(defaults)
    lookup = MatrixLookup(
        unit_code=unit_code or "",
        modalidade=modalidade,
        dieta=dieta or "",
        tipo_animal=tipo_animal or "",
        entry_weight_kg=entry_weight_kg,
        date_ref=date_ref or timezone.localdate(),
    )
    candidates = list(candidate_rows(lookup))
    logger.debug("Matriz de preços: %s candidato(s) para %s.", len(candidates), lookup)
    return select_matrix_row(lookup, candidates, strict=defaults.strict_matrix_resolution)


def resolve_matrix_row_or_raise(
    unit_code: str,
    modalidade: str,
    dieta: str,
    tipo_animal: str,
    entry_weight_kg: Any,
    date_ref: date | None = None,
    *,
    defaults: EngineDefaults | None = None,
) -> PricingMatrixRow:
    row = resolve_matrix_row(
        unit_code,
        modalidade,
        dieta,
        tipo_animal,
        entry_weight_kg,
        date_ref,
        defaults=defaults,
    )
    if row is None:
        raise NoPriceFound(
            MatrixLookup(
                unit_code=unit_code,
                modalidade=modalidade,
                dieta=dieta,
                tipo_animal=tipo_animal,
                entry_weight_kg=entry_weight_kg,
                date_ref=date_ref or timezone.localdate(),
            )
        )
    return row


def build_matrix_suggestions(row: PricingMatrixRow | None, modalidade: str | None = None) -> MatrixSuggestions:
    """Project a pricing row into the parameters a simulation can pre-fill.

    The service price follows ``modalidade`` (or the row's own modality):
    final table per arroba for ``Arroba Prod.``, daily rate for ``Diária``.
    """

    if row is None:
        return MatrixSuggestions()

    modalidade = modalidade or row.modalidade
    service_price = None
    service_price_base = None
    if modalidade == Modalidade.ARROBA_PRODUZIDA:
        service_price = row.tabela_final_r_por_arroba
        service_price_base = row.tabela_base_r_por_arroba
    elif modalidade == Modalidade.DIARIA:
        service_price = row.diaria_r_por_cab_dia

    return MatrixSuggestions(
        dias_cocho=row.dias_cocho,
        gmd_kg_dia=row.gmd_kg_dia,
        pct_pv=row.pct_pv,
        consumo_ms_kg_dia=row.consumo_ms_kg_dia,
        pct_rc=row.pct_rc,
        custo_ms_total=row.custo_ms_total,
        custo_ms_dia_racao_kg=row.custo_ms_dia_racao_kg,
        service_price=service_price,
        service_price_base=service_price_base,
        concat_label=row.concat_label,
        matched_row_id=row.pk,
        ctr_r=row.ctr_r,
        cf_r=row.cf_r,
        corp_r=row.corp_r,
        depr_r=row.depr_r,
        fin_r=row.fin_r,
        custo_fixo_outros_r=row.custo_fixo_outros_r,
        sanitario_pct=row.sanitario_pct,
        mortes_pct=row.mortes_pct,
        rejeito_pct=row.rejeito_pct,
    )


def find_overlapping_rows(rows: Iterable[PricingMatrixRow]) -> list[tuple[PricingMatrixRow, list[OverlapConflict]]]:
    """Group rows by key and report each row colliding with a later one.

    Each colliding pair is reported once, on the row with the smaller id.
    """

    by_key: dict[tuple[str, str, str, str], list[PricingMatrixRow]] = defaultdict(list)
    for row in rows:
        if row.is_active:
            by_key[matrix_key(row)].append(row)

    findings: list[tuple[PricingMatrixRow, list[OverlapConflict]]] = []
    for key_rows in by_key.values():
        key_rows.sort(key=lambda row: row.pk)
        for index, row in enumerate(key_rows):
            conflicts = validate_overlap(row, key_rows[index + 1:])
            if conflicts:
                findings.append((row, conflicts))
    return findings
