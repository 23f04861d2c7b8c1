from django.contrib import admin
from django.http import HttpResponse
from django.utils import timezone

from .forms import PricingMatrixRowForm
from .models import PricingMatrixRow, Unit
from .services.matrix_export import XLSX_CONTENT_TYPE, export_matrix_rows


@admin.register(Unit)
class UnitAdmin(admin.ModelAdmin):
    list_display = ("code", "name", "state", "created_at")
    search_fields = ("code", "name")
    list_filter = ("state",)


@admin.register(PricingMatrixRow)
class PricingMatrixRowAdmin(admin.ModelAdmin):
    form = PricingMatrixRowForm
    list_display = (
        "concat_label",
        "unit",
        "modalidade",
        "dieta",
        "tipo_animal",
        "faixa_label",
        "vigencia_label",
        "tabela_final_r_por_arroba",
        "diaria_r_por_cab_dia",
        "is_active",
    )
    list_filter = ("unit", "modalidade", "dieta", "tipo_animal", "is_active")
    search_fields = ("concat_label", "dieta", "tipo_animal", "unit__code", "unit__name")
    readonly_fields = ("concat_label", "faixa_label", "vigencia_label", "created_by", "created_at", "updated_at")
    list_select_related = ("unit",)
    actions = ("export_to_xlsx",)
    fieldsets = (
        (None, {"fields": ("unit", "modalidade", "dieta", "tipo_animal", "is_active")}),
        ("Faixa e vigência", {"fields": ("peso_de_kg", "peso_ate_kg", "start_validity", "end_validity")}),
        (
            "Parâmetros zootécnicos",
            {
                "fields": (
                    "dias_cocho",
                    "gmd_kg_dia",
                    "pct_pv",
                    "consumo_ms_kg_dia",
                    "pct_rc",
                    "custo_ms_total",
                    "custo_ms_dia_racao_kg",
                )
            },
        ),
        ("Preço do serviço", {"fields": ("tabela_base_r_por_arroba", "tabela_final_r_por_arroba", "diaria_r_por_cab_dia")}),
        (
            "Custos operacionais",
            {
                "fields": (
                    "ctr_r",
                    "cf_r",
                    "corp_r",
                    "depr_r",
                    "fin_r",
                    "custo_fixo_outros_r",
                    "sanitario_pct",
                    "mortes_pct",
                    "rejeito_pct",
                )
            },
        ),
        ("Identificação", {"fields": ("concat_label", "faixa_label", "vigencia_label", "created_by", "created_at", "updated_at")}),
    )

    def save_model(self, request, obj, form, change):
        if not obj.created_by_id:
            obj.created_by = request.user
        super().save_model(request, obj, form, change)

    @admin.action(description="Exportar linhas selecionadas para Excel")
    def export_to_xlsx(self, request, queryset):
        filename = f"matriz_precos_{timezone.localdate():%Y%m%d}.xlsx"
        response = HttpResponse(export_matrix_rows(queryset.order_by("pk")), content_type=XLSX_CONTENT_TYPE)
        response["Content-Disposition"] = f'attachment; filename="{filename}"'
        return response
