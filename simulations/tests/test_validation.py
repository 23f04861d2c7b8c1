from __future__ import annotations

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.test import SimpleTestCase

from simulations.services.validation import validate_field, validate_simulation_input

from .factories import build_input


class ValidateFieldTests(SimpleTestCase):
    def test_hard_limits(self) -> None:
        error, warning = validate_field("days_on_feed", 400)

        self.assertIn("entre 1 e 365", error)
        self.assertIsNone(warning)

    def test_recommended_range(self) -> None:
        error, warning = validate_field("entry_weight_kg", Decimal("150"))

        self.assertIsNone(error)
        self.assertIn("faixa recomendada", warning)

    def test_upper_recommendation_only(self) -> None:
        self.assertEqual(validate_field("feed_waste_pct", 8), (None, None))
        self.assertIn("até 10", validate_field("feed_waste_pct", 15)[1])

    def test_non_numeric_and_unknown_fields(self) -> None:
        self.assertIsNotNone(validate_field("adg_kg_day", "rápido")[0])
        for value in ("NaN", "Infinity", "-Infinity", Decimal("NaN")):
            with self.subTest(value=value):
                self.assertIn("valor numérico inválido", validate_field("entry_weight_kg", value)[0])
        self.assertEqual(validate_field("head_count", 10), (None, None))
        self.assertEqual(validate_field("dmi_pct_bw", None), (None, None))


class ValidateSimulationInputTests(SimpleTestCase):
    def test_typical_input_has_no_warnings(self) -> None:
        self.assertEqual(validate_simulation_input(build_input()), [])

    def test_errors_are_grouped_by_field(self) -> None:
        data = build_input(entry_weight_kg=None, days_on_feed=400, mortality_pct=Decimal("25"))

        with self.assertRaises(ValidationError) as captured:
            validate_simulation_input(data)

        self.assertEqual(
            set(captured.exception.message_dict),
            {"entry_weight_kg", "days_on_feed", "mortality_pct"},
        )

    def test_purchase_price_is_required(self) -> None:
        with self.assertRaises(ValidationError) as captured:
            validate_simulation_input(build_input(purchase_price_per_at=None))

        self.assertIn("purchase_price_per_at", captured.exception.message_dict)

    def test_both_purchase_prices_warn(self) -> None:
        warnings = validate_simulation_input(build_input(purchase_price_per_kg=Decimal("12")))

        self.assertEqual([warning.field for warning in warnings], ["purchase_price_per_kg"])

    def test_unusual_values_warn(self) -> None:
        warnings = validate_simulation_input(build_input(adg_kg_day=Decimal("2.4"), feed_cost_kg_dm=Decimal("2.5")))

        self.assertEqual({warning.field for warning in warnings}, {"adg_kg_day", "feed_cost_kg_dm"})

    def test_non_finite_values_are_field_errors(self) -> None:
        with self.assertRaises(ValidationError) as captured:
            validate_simulation_input(build_input(entry_weight_kg="NaN"))

        self.assertEqual(set(captured.exception.message_dict), {"entry_weight_kg"})
