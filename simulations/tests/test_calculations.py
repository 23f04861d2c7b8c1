from __future__ import annotations

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.test import SimpleTestCase, override_settings

from pricing.models import Modalidade
from simulations.services.calculations import calculate_simulation
from simulations.services.defaults import EngineDefaults
from simulations.services.dre import NegotiationContext

from .factories import build_input


class CalculateSimulationTests(SimpleTestCase):
    def setUp(self) -> None:
        self.defaults = EngineDefaults()

    def test_full_economics_for_one_animal(self) -> None:
        result = calculate_simulation(build_input(), defaults=self.defaults)

        self.assertEqual(result.exit_weight_kg, Decimal("468.00"))
        self.assertEqual(result.carcass_weight_kg, Decimal("248.04"))
        self.assertEqual(result.arrobas_hook, Decimal("16.54"))
        self.assertEqual(result.arrobas_gain, Decimal("11.20"))
        self.assertEqual(result.arrobas_lean, Decimal("20.00"))
        self.assertEqual(result.dmi_kg_day_calculated, Decimal("9.60"))
        self.assertEqual(result.purchase_cost, Decimal("5000.00"))
        self.assertEqual(result.feed_cost_total, Decimal("544.32"))
        self.assertEqual(result.fixed_admin_total, Decimal("180.00"))
        self.assertEqual(result.mortality_cost, Decimal("50.00"))
        self.assertEqual(result.total_cost, Decimal("5899.32"))
        self.assertEqual(result.revenue, Decimal("6614.40"))
        self.assertEqual(result.margin_total, Decimal("715.08"))
        self.assertEqual(result.cost_per_animal, Decimal("5899.32"))
        self.assertEqual(result.cost_per_arroba, Decimal("356.76"))
        self.assertEqual(result.break_even, Decimal("356.76"))
        self.assertEqual(result.spread, Decimal("43.24"))
        self.assertEqual(result.roi_pct, Decimal("12.12"))
        self.assertEqual(result.payback_days, Decimal("990.0"))
        self.assertIsNone(result.dre_pecuarista)
        self.assertIsNone(result.dre_jbs)

    def test_total_and_margin_identities(self) -> None:
        result = calculate_simulation(
            build_input(purchase_price_per_at=None, purchase_price_per_kg=Decimal("11.37"), mortality_pct=Decimal("1.7")),
            defaults=self.defaults,
        )

        components = (
            result.purchase_cost,
            result.feed_cost_total,
            result.health_cost_total,
            result.transport_cost_total,
            result.financial_cost_total,
            result.depreciation_total,
            result.overhead_total,
            result.fixed_admin_total,
            result.mortality_cost,
        )
        self.assertEqual(result.total_cost, sum(components, Decimal("0")))
        self.assertEqual(result.margin_total, result.revenue - result.total_cost)
        self.assertEqual(result.purchase_cost, Decimal("3411.00"))

    def test_zero_days_are_guarded(self) -> None:
        result = calculate_simulation(
            build_input(
                days_on_feed=0,
                purchase_price_per_at=None,
                mortality_pct=0,
                health_cost_total=0,
                transport_cost_total=0,
                financial_cost_total=0,
                depreciation_total=0,
                overhead_total=0,
            ),
            defaults=self.defaults,
        )

        self.assertEqual(result.exit_weight_kg, Decimal("300.00"))
        self.assertEqual(result.feed_cost_total, Decimal("0.00"))
        self.assertEqual(result.fixed_admin_total, Decimal("0.00"))
        self.assertEqual(result.total_cost, Decimal("0.00"))
        self.assertEqual(result.roi_pct, Decimal("0.00"))
        self.assertEqual(result.cost_per_arroba, Decimal("0.00"))
        self.assertIsNone(result.payback_days)

    def test_no_payback_without_positive_margin(self) -> None:
        result = calculate_simulation(build_input(selling_price_per_at=Decimal("300")), defaults=self.defaults)

        self.assertLess(result.margin_total, 0)
        self.assertIsNone(result.payback_days)

    def test_missing_required_fields(self) -> None:
        with self.assertRaises(ValidationError) as captured:
            calculate_simulation(build_input(adg_kg_day=None, feed_cost_kg_dm=""), defaults=self.defaults)

        self.assertEqual(set(captured.exception.message_dict), {"adg_kg_day", "feed_cost_kg_dm"})

    @override_settings(FEEDLOT_ENGINE={"ARROBA_KG": "15", "DEFAULT_CARCASS_YIELD_PCT": "50"})
    def test_defaults_come_from_settings(self) -> None:
        result = calculate_simulation(build_input())

        self.assertEqual(result.carcass_weight_kg, Decimal("234.00"))

    def test_as_dict_exposes_every_field(self) -> None:
        payload = calculate_simulation(build_input(), defaults=self.defaults).as_dict()

        self.assertEqual(payload["total_cost"], Decimal("5899.32"))
        self.assertIn("dre_jbs", payload)


class CalculateSimulationWithNegotiationTests(SimpleTestCase):
    def setUp(self) -> None:
        self.defaults = EngineDefaults()
        self.negotiation = NegotiationContext(
            modalidade=Modalidade.ARROBA_PRODUZIDA,
            service_price=Decimal("140"),
            head_count=100,
            lean_price_per_at=Decimal("250"),
            abattoir_fee_total=Decimal("1000"),
            rancher_freight_total=Decimal("2000"),
            icms_return_total=Decimal("500"),
        )

    def test_builds_both_income_statements(self) -> None:
        result = calculate_simulation(build_input(negotiation=self.negotiation), defaults=self.defaults)
        pecuarista = result.dre_pecuarista
        boitel = result.dre_jbs

        self.assertEqual(pecuarista.revenue_per_head, Decimal("6614.40"))
        self.assertEqual(pecuarista.cost_lean_per_head, Decimal("5000.00"))
        self.assertEqual(pecuarista.cost_fattening_per_head, Decimal("1568.00"))
        self.assertEqual(pecuarista.fees_per_head, Decimal("35.00"))
        self.assertEqual(pecuarista.result_per_head, Decimal("11.40"))
        self.assertEqual(pecuarista.result_per_lot, Decimal("1140.00"))
        self.assertEqual(pecuarista.cost_per_arroba_produced, Decimal("589.55"))
        self.assertEqual(pecuarista.monthly_return_pct, Decimal("0.06"))

        self.assertEqual(boitel.revenue_per_head, Decimal("1568.00"))
        self.assertEqual(boitel.feed_cost_per_head, Decimal("544.32"))
        self.assertEqual(boitel.total_cost_per_head, Decimal("899.32"))
        self.assertEqual(boitel.result_per_head, Decimal("668.68"))
        self.assertEqual(boitel.result_jbs, Decimal("66868.00"))
        self.assertEqual(boitel.result_per_arroba, Decimal("59.70"))

    def test_incomplete_negotiation_omits_income_statements(self) -> None:
        negotiation = NegotiationContext(modalidade=Modalidade.DIARIA, service_price=Decimal("15"), head_count=0)

        with self.assertLogs("simulations.services.calculations", level="DEBUG"):
            result = calculate_simulation(build_input(negotiation=negotiation), defaults=self.defaults)

        self.assertIsNone(result.dre_pecuarista)
        self.assertIsNone(result.dre_jbs)
        self.assertEqual(result.total_cost, Decimal("5899.32"))
