from __future__ import annotations

from datetime import date
from decimal import Decimal
from types import SimpleNamespace

from django.test import SimpleTestCase

from pricing.services.overlap import OverlapConflictError, ensure_no_overlap, validate_overlap


def make_row(pk=None, peso_de=None, peso_ate=None, start=None, end=None, **overrides):
    values = {
        "pk": pk,
        "unit_code": "BOI-GO",
        "modalidade": "Arroba Prod.",
        "dieta": "Padrão",
        "tipo_animal": "Macho",
        "peso_de_kg": Decimal(peso_de) if peso_de is not None else None,
        "peso_ate_kg": Decimal(peso_ate) if peso_ate is not None else None,
        "start_validity": start,
        "end_validity": end,
        "is_active": True,
        "concat_label": f"linha {pk}",
    }
    values.update(overrides)
    return SimpleNamespace(**values)


class ValidateOverlapTests(SimpleTestCase):
    def test_intersecting_weights_in_open_validity_conflict(self) -> None:
        existing = make_row(pk=1, peso_de="300", peso_ate="450")
        candidate = make_row(peso_de="400", peso_ate="500")

        conflicts = validate_overlap(candidate, [existing])

        self.assertEqual([conflict.row_id for conflict in conflicts], [1])
        self.assertIn("#1", conflicts[0].message)

    def test_touching_weight_windows_do_not_conflict(self) -> None:
        existing = make_row(pk=1, peso_de="300", peso_ate="450")
        candidate = make_row(peso_de="450", peso_ate="600")

        self.assertEqual(validate_overlap(candidate, [existing]), [])

    def test_disjoint_validity_does_not_conflict(self) -> None:
        existing = make_row(pk=1, peso_de="300", peso_ate="450", start=date(2025, 1, 1), end=date(2025, 6, 30))
        candidate = make_row(peso_de="300", peso_ate="450", start=date(2025, 7, 1))

        self.assertEqual(validate_overlap(candidate, [existing]), [])

    def test_validity_sharing_a_day_conflicts(self) -> None:
        existing = make_row(pk=1, start=date(2025, 1, 1), end=date(2025, 6, 30))
        candidate = make_row(start=date(2025, 6, 30), end=date(2025, 12, 31))

        self.assertEqual(len(validate_overlap(candidate, [existing])), 1)

    def test_dated_weight_overlap_conflicts(self) -> None:
        existing = make_row(pk=1, peso_de="300", peso_ate="450", start=date(2024, 1, 1), end=date(2024, 12, 31))
        candidate = make_row(peso_de="400", peso_ate="500", start=date(2024, 6, 1), end=date(2025, 6, 1))

        self.assertEqual([conflict.row_id for conflict in validate_overlap(candidate, [existing])], [1])

    def test_adjacent_weights_with_overlapping_dates_do_not_conflict(self) -> None:
        existing = make_row(pk=1, peso_de="300", peso_ate="450", start=date(2024, 1, 1), end=date(2024, 12, 31))
        candidate = make_row(peso_de="450", peso_ate="600", start=date(2024, 6, 1), end=date(2025, 6, 1))

        self.assertEqual(validate_overlap(candidate, [existing]), [])

    def test_unbounded_windows_conflict_with_everything(self) -> None:
        existing = make_row(pk=1, peso_de="800", peso_ate="900", start=date(2030, 1, 1))
        candidate = make_row()

        self.assertEqual(len(validate_overlap(candidate, [existing])), 1)

    def test_skips_self_other_keys_and_inactive_rows(self) -> None:
        candidate = make_row(pk=5, peso_de="300", peso_ate="450")
        rows = [
            make_row(pk=5, peso_de="300", peso_ate="450"),
            make_row(pk=6, peso_de="300", peso_ate="450", dieta="Premium"),
            make_row(pk=7, peso_de="300", peso_ate="450", is_active=False),
            make_row(pk=8, peso_de="300", peso_ate="450", unit_code="BOI-MT"),
        ]

        self.assertEqual(validate_overlap(candidate, rows), [])

    def test_inactive_candidate_never_conflicts(self) -> None:
        candidate = make_row(peso_de="300", peso_ate="450", is_active=False)

        self.assertEqual(validate_overlap(candidate, [make_row(pk=1, peso_de="300", peso_ate="450")]), [])

    def test_ensure_no_overlap_raises_with_conflicts(self) -> None:
        rows = [make_row(pk=1, peso_de="300", peso_ate="450"), make_row(pk=2, peso_de="440", peso_ate="500")]

        with self.assertRaises(OverlapConflictError) as captured:
            ensure_no_overlap(make_row(peso_de="420", peso_ate="460"), rows)

        self.assertEqual([conflict.row_id for conflict in captured.exception.conflicts], [1, 2])
        self.assertEqual(len(captured.exception.messages), 2)
