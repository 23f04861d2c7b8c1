from __future__ import annotations

from decimal import Decimal

from django.test import SimpleTestCase

from simulations.services.defaults import EngineDefaults
from simulations.services.projection import (
    ScaleType,
    compute_feed_cost_total,
    effective_entry_weight,
    estimate_daily_intake,
    project_scale_weights,
    project_weights,
)


class ProjectWeightsTests(SimpleTestCase):
    def setUp(self) -> None:
        self.defaults = EngineDefaults()

    def test_projects_exit_carcass_and_arrobas(self) -> None:
        projection = project_weights(300, Decimal("1.4"), 120, defaults=self.defaults)

        self.assertEqual(projection.exit_weight_kg, Decimal("468"))
        self.assertEqual(projection.carcass_weight_kg, Decimal("248.04"))
        self.assertEqual(projection.arrobas_hook, Decimal("16.536"))
        self.assertEqual(projection.arrobas_gain, Decimal("11.2"))
        self.assertEqual(projection.arrobas_lean, Decimal("20"))

    def test_custom_carcass_yield(self) -> None:
        projection = project_weights(300, Decimal("1.5"), 100, Decimal("55"), defaults=self.defaults)

        self.assertEqual(projection.carcass_weight_kg, Decimal("247.5"))

    def test_non_positive_days_keep_entry_weight(self) -> None:
        for days in (0, -10):
            with self.subTest(days=days):
                projection = project_weights(320, Decimal("1.6"), days, defaults=self.defaults)
                self.assertEqual(projection.exit_weight_kg, Decimal("320"))
                self.assertEqual(projection.arrobas_gain, Decimal("0"))

    def test_exit_weight_never_below_entry(self) -> None:
        for adg in (Decimal("0"), Decimal("0.8"), Decimal("2.1")):
            projection = project_weights(280, adg, 90, defaults=self.defaults)
            self.assertGreaterEqual(projection.exit_weight_kg, projection.entry_weight_kg)


class DailyIntakeTests(SimpleTestCase):
    def setUp(self) -> None:
        self.defaults = EngineDefaults()
        self.projection = project_weights(300, Decimal("1.4"), 120, defaults=self.defaults)

    def test_average_weight_intake_and_feed_cost(self) -> None:
        dmi = estimate_daily_intake(self.projection, dmi_pct_bw=Decimal("2.5"), defaults=self.defaults)
        feed_cost = compute_feed_cost_total(dmi, 120, Decimal("0.45"), Decimal("5"))

        self.assertEqual(dmi, Decimal("9.6"))
        self.assertEqual(feed_cost.quantize(Decimal("0.01")), Decimal("544.32"))

    def test_direct_intake_wins(self) -> None:
        dmi = estimate_daily_intake(
            self.projection,
            dmi_kg_day=Decimal("10.2"),
            dmi_pct_bw=Decimal("2.5"),
            defaults=self.defaults,
        )
        self.assertEqual(dmi, Decimal("10.2"))

    def test_exit_weight_base_and_default_pct(self) -> None:
        dmi = estimate_daily_intake(self.projection, use_average_weight=False, defaults=self.defaults)
        self.assertEqual(dmi, Decimal("11.7"))

    def test_feed_cost_is_zero_without_days(self) -> None:
        self.assertEqual(compute_feed_cost_total(Decimal("9.6"), 0, Decimal("0.45"), Decimal("5")), Decimal("0"))


class EntryWeightTests(SimpleTestCase):
    def test_shrinkage_by_scale(self) -> None:
        weights = {
            "peso_fazenda_kg": Decimal("400"),
            "peso_balancao_kg": Decimal("390"),
            "peso_balancinha_kg": Decimal("380"),
            "quebra_fazenda_pct": Decimal("3"),
            "quebra_balanca_pct": Decimal("1"),
        }

        self.assertEqual(effective_entry_weight(ScaleType.FAZENDA, **weights), Decimal("388"))
        self.assertEqual(effective_entry_weight(ScaleType.BALANCAO, **weights), Decimal("386.1"))
        self.assertEqual(effective_entry_weight(ScaleType.BALANCINHA, **weights), Decimal("380"))
        self.assertEqual(effective_entry_weight("Outra", **weights), Decimal("0"))

    def test_missing_weight_yields_zero(self) -> None:
        self.assertEqual(effective_entry_weight(ScaleType.FAZENDA, quebra_fazenda_pct=3), Decimal("0"))

    def test_projected_scale_readings(self) -> None:
        readings = project_scale_weights(Decimal("400"), Decimal("3"), Decimal("1"))

        self.assertEqual(readings["peso_balancao_kg"], Decimal("388"))
        self.assertEqual(readings["peso_balancinha_kg"], Decimal("384.12"))
