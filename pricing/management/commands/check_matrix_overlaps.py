from __future__ import annotations

from typing import Any

from django.core.management.base import BaseCommand, CommandError, CommandParser

from pricing.models import PricingMatrixRow
from pricing.services.matrix_resolver import find_overlapping_rows


class Command(BaseCommand):
    help = (
        "Revalida todas as linhas ativas da matriz de preços e lista as faixas de peso "
        "e vigência que se sobrepõem dentro da mesma chave."
    )

    def add_arguments(self, parser: CommandParser) -> None:
        parser.add_argument(
            "--unit",
            help="Código da unidade a verificar. Se omitido, todas as unidades são verificadas.",
        )

    def handle(self, *args: Any, **options: Any) -> None:
        rows = PricingMatrixRow.objects.active().select_related("unit").order_by("pk")
        unit_code: str | None = options.get("unit")
        if unit_code:
            rows = rows.filter(unit_id=unit_code)

        findings = find_overlapping_rows(rows)
        if not findings:
            self.stdout.write(self.style.SUCCESS("Nenhuma sobreposição encontrada na matriz de preços."))
            return

        total = 0
        for row, conflicts in findings:
            label = row.concat_label or str(row)
            for conflict in conflicts:
                total += 1
                self.stdout.write(self.style.ERROR(f"Linha #{row.pk} ({label}): {conflict.message}"))
        raise CommandError(f"Sobreposições encontradas: {total}")
