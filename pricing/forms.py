from __future__ import annotations

from typing import Any

from django import forms

from boitel.forms.widgets import AppDateInput, KilogramInput

from .models import PricingMatrixRow


class PricingMatrixRowForm(forms.ModelForm):
    """Admin form for rate-card rows; overlap errors surface as non-field errors."""

    class Meta:
        model = PricingMatrixRow
        fields = [
            "unit",
            "modalidade",
            "dieta",
            "tipo_animal",
            "peso_de_kg",
            "peso_ate_kg",
            "start_validity",
            "end_validity",
            "dias_cocho",
            "gmd_kg_dia",
            "pct_pv",
            "consumo_ms_kg_dia",
            "pct_rc",
            "custo_ms_total",
            "custo_ms_dia_racao_kg",
            "tabela_base_r_por_arroba",
            "tabela_final_r_por_arroba",
            "diaria_r_por_cab_dia",
            "ctr_r",
            "cf_r",
            "corp_r",
            "depr_r",
            "fin_r",
            "custo_fixo_outros_r",
            "sanitario_pct",
            "mortes_pct",
            "rejeito_pct",
            "is_active",
        ]
        widgets = {
            "peso_de_kg": KilogramInput(),
            "peso_ate_kg": KilogramInput(),
            "start_validity": AppDateInput(),
            "end_validity": AppDateInput(),
        }

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        for field in self.fields.values():
            if isinstance(field, forms.DecimalField):
                field.widget.attrs.setdefault("step", "0.0001" if field.decimal_places == 4 else "0.01")
                field.widget.attrs.setdefault("min", "0")

    def clean_dieta(self) -> str:
        return (self.cleaned_data.get("dieta") or "").strip()

    def clean_tipo_animal(self) -> str:
        return (self.cleaned_data.get("tipo_animal") or "").strip()
