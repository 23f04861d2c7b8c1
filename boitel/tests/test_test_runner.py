from __future__ import annotations

from django.test import SimpleTestCase

from boitel.test_runner import ENGINE_LOGGERS, NonInteractiveDiscoverRunner


class NonInteractiveDiscoverRunnerTests(SimpleTestCase):
    def test_never_prompts(self) -> None:
        runner = NonInteractiveDiscoverRunner(interactive=True)

        self.assertFalse(runner.interactive)

    def test_engine_loggers_cover_both_apps(self) -> None:
        self.assertEqual(set(ENGINE_LOGGERS), {"pricing", "simulations"})
