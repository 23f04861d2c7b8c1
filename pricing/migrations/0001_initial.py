import django.core.validators
import django.db.models.deletion
from decimal import Decimal

from django.conf import settings
from django.db import migrations, models


def _money(verbose_name: str) -> models.DecimalField:
    return models.DecimalField(
        blank=True, decimal_places=2, max_digits=12, null=True, verbose_name=verbose_name
    )


def _rate(verbose_name: str) -> models.DecimalField:
    return models.DecimalField(
        blank=True, decimal_places=4, max_digits=8, null=True, verbose_name=verbose_name
    )


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Unit",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
                    ),
                ),
                ("code", models.CharField(max_length=16, unique=True, verbose_name="Código")),
                ("name", models.CharField(blank=True, max_length=150, verbose_name="Nome")),
                ("state", models.CharField(blank=True, max_length=2, verbose_name="UF")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "verbose_name": "Unidade",
                "verbose_name_plural": "Unidades",
                "ordering": ("code",),
            },
        ),
        migrations.CreateModel(
            name="PricingMatrixRow",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
                    ),
                ),
                (
                    "modalidade",
                    models.CharField(
                        choices=[
                            ("Diária", "Diária (R$/cab/dia)"),
                            ("Arroba Prod.", "Arroba produzida (R$/@)"),
                        ],
                        max_length=16,
                        verbose_name="Modalidade",
                    ),
                ),
                ("dieta", models.CharField(max_length=64, verbose_name="Dieta")),
                ("tipo_animal", models.CharField(max_length=64, verbose_name="Tipo de animal")),
                (
                    "peso_de_kg",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        max_digits=7,
                        null=True,
                        validators=[django.core.validators.MinValueValidator(Decimal("0"))],
                        verbose_name="Peso de (kg)",
                    ),
                ),
                (
                    "peso_ate_kg",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        help_text="Limite exclusivo. Deixe em branco para faixa sem limite superior.",
                        max_digits=7,
                        null=True,
                        validators=[django.core.validators.MinValueValidator(Decimal("0"))],
                        verbose_name="Peso até (kg)",
                    ),
                ),
                (
                    "start_validity",
                    models.DateField(blank=True, null=True, verbose_name="Início da vigência"),
                ),
                (
                    "end_validity",
                    models.DateField(
                        blank=True,
                        help_text="Deixe em branco para vigência em aberto.",
                        null=True,
                        verbose_name="Fim da vigência",
                    ),
                ),
                (
                    "dias_cocho",
                    models.PositiveSmallIntegerField(blank=True, null=True, verbose_name="Dias de cocho"),
                ),
                ("gmd_kg_dia", _rate("GMD (kg/dia)")),
                ("pct_pv", _rate("Consumo % PV")),
                ("consumo_ms_kg_dia", _rate("Consumo MS (kg/dia)")),
                ("pct_rc", _rate("Rendimento de carcaça (%)")),
                ("custo_ms_total", _money("Custo MS total (R$)")),
                ("custo_ms_dia_racao_kg", _rate("Custo MS ração (R$/kg)")),
                ("tabela_base_r_por_arroba", _money("Tabela base (R$/@)")),
                ("tabela_final_r_por_arroba", _money("Tabela final (R$/@)")),
                ("diaria_r_por_cab_dia", _money("Diária (R$/cab/dia)")),
                ("ctr_r", _money("CTR (R$/cab)")),
                ("cf_r", _money("Custo fixo (R$/cab)")),
                ("corp_r", _money("Corporativo (R$/cab)")),
                ("depr_r", _money("Depreciação (R$/cab)")),
                ("fin_r", _money("Financeiro (R$/cab)")),
                ("custo_fixo_outros_r", _money("Outros custos fixos (R$/cab)")),
                ("sanitario_pct", _rate("Sanitário (%)")),
                ("mortes_pct", _rate("Mortes (%)")),
                ("rejeito_pct", _rate("Rejeito (%)")),
                (
                    "concat_label",
                    models.CharField(blank=True, editable=False, max_length=255, verbose_name="Identificação"),
                ),
                (
                    "faixa_label",
                    models.CharField(blank=True, editable=False, max_length=64, verbose_name="Faixa de peso"),
                ),
                (
                    "vigencia_label",
                    models.CharField(blank=True, editable=False, max_length=64, verbose_name="Vigência"),
                ),
                ("is_active", models.BooleanField(default=True, verbose_name="Ativa")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="pricing_rows_created",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Criado por",
                    ),
                ),
                (
                    "unit",
                    models.ForeignKey(
                        db_column="unit_code",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="pricing_rows",
                        to="pricing.unit",
                        to_field="code",
                        verbose_name="Unidade",
                    ),
                ),
            ],
            options={
                "verbose_name": "Linha da matriz de preços",
                "verbose_name_plural": "Matriz de preços",
                "ordering": ("unit_id", "modalidade", "dieta", "tipo_animal", "peso_de_kg", "start_validity"),
                "indexes": [
                    models.Index(
                        fields=["unit", "modalidade", "dieta", "tipo_animal"],
                        name="pricing_matrix_key_idx",
                    )
                ],
            },
        ),
    ]
