from __future__ import annotations

from datetime import date
from decimal import Decimal
from io import BytesIO
from typing import Any, Iterable

from openpyxl import Workbook

XLSX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

EXPORT_COLUMNS: tuple[tuple[str, str], ...] = (
    ("id", "ID"),
    ("unit_code", "Unidade"),
    ("modalidade", "Modalidade"),
    ("dieta", "Dieta"),
    ("tipo_animal", "Tipo de animal"),
    ("peso_de_kg", "Peso de (kg)"),
    ("peso_ate_kg", "Peso até (kg)"),
    ("start_validity", "Início da vigência"),
    ("end_validity", "Fim da vigência"),
    ("dias_cocho", "Dias de cocho"),
    ("gmd_kg_dia", "GMD (kg/dia)"),
    ("pct_pv", "Consumo % PV"),
    ("consumo_ms_kg_dia", "Consumo MS (kg/dia)"),
    ("pct_rc", "Rendimento de carcaça (%)"),
    ("custo_ms_total", "Custo MS total (R$)"),
    ("custo_ms_dia_racao_kg", "Custo MS ração (R$/kg)"),
    ("tabela_base_r_por_arroba", "Tabela base (R$/@)"),
    ("tabela_final_r_por_arroba", "Tabela final (R$/@)"),
    ("diaria_r_por_cab_dia", "Diária (R$/cab/dia)"),
    ("ctr_r", "CTR (R$/cab)"),
    ("cf_r", "Custo fixo (R$/cab)"),
    ("corp_r", "Corporativo (R$/cab)"),
    ("depr_r", "Depreciação (R$/cab)"),
    ("fin_r", "Financeiro (R$/cab)"),
    ("custo_fixo_outros_r", "Outros custos fixos (R$/cab)"),
    ("sanitario_pct", "Sanitário (%)"),
    ("mortes_pct", "Mortes (%)"),
    ("rejeito_pct", "Rejeito (%)"),
    ("is_active", "Ativa"),
    ("concat_label", "Identificação"),
)


def _cell_value(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, bool):
        return "Sim" if value else "Não"
    if isinstance(value, date):
        return value.strftime("%d/%m/%Y")
    return value


def build_matrix_workbook(rows: Iterable[Any]) -> Workbook:
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = "Matriz de preços"
    sheet.append([header for _, header in EXPORT_COLUMNS])
    for row in rows:
        sheet.append([_cell_value(getattr(row, attribute)) for attribute, _ in EXPORT_COLUMNS])
    sheet.freeze_panes = "A2"
    return workbook


def export_matrix_rows(rows: Iterable[Any]) -> bytes:
    buffer = BytesIO()
    build_matrix_workbook(rows).save(buffer)
    return buffer.getvalue()
