from __future__ import annotations

from datetime import date
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _

from .services.labels import build_concat_label, build_faixa_label, build_vigencia_label
from .services.overlap import ensure_no_overlap


class Modalidade(models.TextChoices):
    DIARIA = "Diária", _("Diária (R$/cab/dia)")
    ARROBA_PRODUZIDA = "Arroba Prod.", _("Arroba produzida (R$/@)")


# Campo de preço exigido por cada modalidade.
SERVICE_PRICE_FIELD_BY_MODALIDADE = {
    Modalidade.ARROBA_PRODUZIDA: "tabela_final_r_por_arroba",
    Modalidade.DIARIA: "diaria_r_por_cab_dia",
}


class Unit(models.Model):
    code = models.CharField("Código", max_length=16, unique=True)
    name = models.CharField("Nome", max_length=150, blank=True)
    state = models.CharField("UF", max_length=2, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = "Unidade"
        verbose_name_plural = "Unidades"
        ordering = ("code",)

    def __str__(self) -> str:
        return f"{self.code} · {self.name}" if self.name else self.code


class PricingMatrixRowQuerySet(models.QuerySet):
    def active(self) -> "PricingMatrixRowQuerySet":
        return self.filter(is_active=True)

    def for_key(
        self,
        *,
        unit_code: str,
        modalidade: str,
        dieta: str,
        tipo_animal: str,
    ) -> "PricingMatrixRowQuerySet":
        return self.filter(
            unit_id=unit_code,
            modalidade=modalidade,
            dieta=dieta,
            tipo_animal=tipo_animal,
        )

    def containing(self, *, entry_weight_kg: Decimal, date_ref: date) -> "PricingMatrixRowQuerySet":
        """Rows whose weight window holds the weight and whose validity holds the date.

        Weight windows are half-open ``[peso_de_kg, peso_ate_kg)``; validity
        windows are inclusive on both ends. A null bound is open on that side.
        """

        return self.filter(
            models.Q(peso_de_kg__isnull=True) | models.Q(peso_de_kg__lte=entry_weight_kg),
            models.Q(peso_ate_kg__isnull=True) | models.Q(peso_ate_kg__gt=entry_weight_kg),
            models.Q(start_validity__isnull=True) | models.Q(start_validity__lte=date_ref),
            models.Q(end_validity__isnull=True) | models.Q(end_validity__gte=date_ref),
        )

    def _distinct_values(self, field_name: str) -> list[str]:
        return list(self.order_by(field_name).values_list(field_name, flat=True).distinct())

    def dietas(self) -> list[str]:
        return self._distinct_values("dieta")

    def tipos_animal(self) -> list[str]:
        return self._distinct_values("tipo_animal")

    def modalidades(self) -> list[str]:
        return self._distinct_values("modalidade")

    def in_resolution_order(self) -> "PricingMatrixRowQuerySet":
        return self.order_by(
            models.F("peso_de_kg").asc(nulls_first=True),
            models.F("peso_ate_kg").asc(nulls_last=True),
            "pk",
        )


def _money_field(verbose_name: str) -> models.DecimalField:
    return models.DecimalField(verbose_name, max_digits=12, decimal_places=2, null=True, blank=True)


def _rate_field(verbose_name: str) -> models.DecimalField:
    return models.DecimalField(verbose_name, max_digits=8, decimal_places=4, null=True, blank=True)


class PricingMatrixRow(models.Model):
    unit = models.ForeignKey(
        Unit,
        on_delete=models.PROTECT,
        to_field="code",
        db_column="unit_code",
        related_name="pricing_rows",
        verbose_name="Unidade",
    )
    modalidade = models.CharField("Modalidade", max_length=16, choices=Modalidade.choices)
    dieta = models.CharField("Dieta", max_length=64)
    tipo_animal = models.CharField("Tipo de animal", max_length=64)

    peso_de_kg = models.DecimalField(
        "Peso de (kg)",
        max_digits=7,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal("0"))],
    )
    peso_ate_kg = models.DecimalField(
        "Peso até (kg)",
        max_digits=7,
        decimal_places=2,
        null=True,
        blank=True,
        help_text="Limite exclusivo. Deixe em branco para faixa sem limite superior.",
        validators=[MinValueValidator(Decimal("0"))],
    )
    start_validity = models.DateField("Início da vigência", null=True, blank=True)
    end_validity = models.DateField(
        "Fim da vigência",
        null=True,
        blank=True,
        help_text="Deixe em branco para vigência em aberto.",
    )

    dias_cocho = models.PositiveSmallIntegerField("Dias de cocho", null=True, blank=True)
    gmd_kg_dia = _rate_field("GMD (kg/dia)")
    pct_pv = _rate_field("Consumo % PV")
    consumo_ms_kg_dia = _rate_field("Consumo MS (kg/dia)")
    pct_rc = _rate_field("Rendimento de carcaça (%)")
    custo_ms_total = _money_field("Custo MS total (R$)")
    custo_ms_dia_racao_kg = _rate_field("Custo MS ração (R$/kg)")

    tabela_base_r_por_arroba = _money_field("Tabela base (R$/@)")
    tabela_final_r_por_arroba = _money_field("Tabela final (R$/@)")
    diaria_r_por_cab_dia = _money_field("Diária (R$/cab/dia)")

    ctr_r = _money_field("CTR (R$/cab)")
    cf_r = _money_field("Custo fixo (R$/cab)")
    corp_r = _money_field("Corporativo (R$/cab)")
    depr_r = _money_field("Depreciação (R$/cab)")
    fin_r = _money_field("Financeiro (R$/cab)")
    custo_fixo_outros_r = _money_field("Outros custos fixos (R$/cab)")
    sanitario_pct = _rate_field("Sanitário (%)")
    mortes_pct = _rate_field("Mortes (%)")
    rejeito_pct = _rate_field("Rejeito (%)")

    concat_label = models.CharField("Identificação", max_length=255, editable=False, blank=True)
    faixa_label = models.CharField("Faixa de peso", max_length=64, editable=False, blank=True)
    vigencia_label = models.CharField("Vigência", max_length=64, editable=False, blank=True)

    is_active = models.BooleanField("Ativa", default=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="pricing_rows_created",
        verbose_name="Criado por",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects: PricingMatrixRowQuerySet = PricingMatrixRowQuerySet.as_manager()

    class Meta:
        verbose_name = "Linha da matriz de preços"
        verbose_name_plural = "Matriz de preços"
        ordering = ("unit_id", "modalidade", "dieta", "tipo_animal", "peso_de_kg", "start_validity")
        indexes = [
            models.Index(
                fields=["unit", "modalidade", "dieta", "tipo_animal"],
                name="pricing_matrix_key_idx",
            ),
        ]

    def __str__(self) -> str:
        return self.concat_label or build_concat_label(self)

    @property
    def unit_code(self) -> str:
        return self.unit_id

    @property
    def service_price_field(self) -> str | None:
        return SERVICE_PRICE_FIELD_BY_MODALIDADE.get(self.modalidade)

    def service_price(self) -> Decimal | None:
        field_name = self.service_price_field
        return getattr(self, field_name) if field_name else None

    def refresh_labels(self) -> None:
        self.faixa_label = build_faixa_label(self.peso_de_kg, self.peso_ate_kg)
        self.vigencia_label = build_vigencia_label(self.start_validity, self.end_validity)
        self.concat_label = build_concat_label(self)

    def same_key_rows(self) -> PricingMatrixRowQuerySet:
        queryset = PricingMatrixRow.objects.active().for_key(
            unit_code=self.unit_id,
            modalidade=self.modalidade,
            dieta=self.dieta,
            tipo_animal=self.tipo_animal,
        )
        if self.pk:
            queryset = queryset.exclude(pk=self.pk)
        return queryset

    def validate_no_overlap(self) -> None:
        if not self.unit_id or not self.is_active:
            return
        ensure_no_overlap(self, self.same_key_rows())

    def clean(self) -> None:
        super().clean()
        errors: dict[str, list[str]] = {}

        if (
            self.peso_de_kg is not None
            and self.peso_ate_kg is not None
            and self.peso_de_kg >= self.peso_ate_kg
        ):
            errors.setdefault("peso_ate_kg", []).append(
                "O peso final da faixa deve ser maior que o peso inicial."
            )

        if self.start_validity and self.end_validity and self.start_validity > self.end_validity:
            errors.setdefault("end_validity", []).append(
                "O fim da vigência deve ser igual ou posterior ao início."
            )

        price_field = self.service_price_field
        if price_field and getattr(self, price_field) is None:
            label = self._meta.get_field(price_field).verbose_name
            errors.setdefault(price_field, []).append(
                f"Informe {label} para a modalidade {self.modalidade}."
            )

        if errors:
            raise ValidationError(errors)

        self.validate_no_overlap()

    def save(self, *args, **kwargs) -> None:
        self.dieta = (self.dieta or "").strip()
        self.tipo_animal = (self.tipo_animal or "").strip()
        self.refresh_labels()
        self.full_clean()
        update_fields = kwargs.get("update_fields")
        if update_fields is not None:
            kwargs["update_fields"] = set(update_fields) | {"concat_label", "faixa_label", "vigencia_label"}
        super().save(*args, **kwargs)
