"""Tests for configuration loading and validation."""

import sys
from pathlib import Path
import tempfile
import unittest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from ecosync.engine import EngineFactory
from ecosync.exceptions import ConfigurationError
from ecosync.config import (
    AIServiceConfig, ConfigFormat, EcoSyncConfig, MonitoringConfig, SimulationConfig,
    TariffConfig
)


class TestAIServiceConfig(unittest.TestCase):

    def test_from_env(self):
        config = AIServiceConfig.from_env({
            "DEEPSEEK_API_KEY": "sk-live-0123456789",
            "DEEPSEEK_MODEL": "deepseek-reasoner"
        })
        self.assertTrue(config.is_configured)
        self.assertEqual(config.chat_model, "deepseek-reasoner")
        self.assertEqual(config.base_url, "https://api.deepseek.com/v1")
        self.assertEqual(config.vision_model, "deepseek-vl")

    def test_empty_env_not_configured(self):
        config = AIServiceConfig.from_env({})
        self.assertFalse(config.is_configured)
        self.assertEqual(config.masked_key, "Not set")

    def test_placeholder_key_not_configured(self):
        self.assertFalse(AIServiceConfig(api_key="your_deepseek_api_key_here").is_configured)

    def test_missing_key_is_warning(self):
        result = AIServiceConfig().validate()
        self.assertTrue(result.is_valid)
        self.assertEqual(len(result.warnings), 1)

    def test_bad_url_is_error(self):
        self.assertFalse(AIServiceConfig(base_url="ftp://example").validate().is_valid)

    def test_key_not_serialized(self):
        self.assertNotIn("api_key", AIServiceConfig(api_key="secret").to_dict())


class TestEcoSyncConfig(unittest.TestCase):

    def test_defaults_are_valid(self):
        result = EcoSyncConfig().validate()
        self.assertTrue(result.is_valid, result.errors)

    def test_errors_are_prefixed(self):
        config = EcoSyncConfig(
            monitoring=MonitoringConfig(log_level="LOUD"),
            tariff=TariffConfig(daily_usage=0)
        )
        result = config.validate()
        self.assertFalse(result.is_valid)
        self.assertIn("monitoring: Invalid log level: LOUD", result.errors)
        self.assertTrue(any(e.startswith("tariff: ") for e in result.errors))
        self.assertFalse(config.validate_and_log())

    def test_strict_validation_raises(self):
        config = EcoSyncConfig(tariff=TariffConfig(daily_usage=0))
        with self.assertRaises(ConfigurationError):
            config.validate_and_log(strict=True)
        self.assertTrue(EcoSyncConfig().validate_and_log(strict=True))

    def test_simulation_validation(self):
        self.assertFalse(SimulationConfig(hours_of_history=-1).validate().is_valid)
        result = SimulationConfig(hours_of_history=0).validate()
        self.assertTrue(result.is_valid)
        self.assertTrue(result.warnings)

    def test_yaml_round_trip(self):
        config = EcoSyncConfig(
            name="Kigali home",
            simulation=SimulationConfig(random_seed=42),
            tariff=TariffConfig(grid_cost_per_kwh=182.0)
        )
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "ecosync.yaml"
            config.save_to_file(path)
            loaded = EcoSyncConfig.load_from_file(path)

        self.assertEqual(loaded.name, "Kigali home")
        self.assertEqual(loaded.simulation.random_seed, 42)
        self.assertEqual(loaded.tariff.grid_cost_per_kwh, 182.0)

    def test_json_round_trip(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "ecosync.json"
            EcoSyncConfig(location="Kigali").save_to_file(path, ConfigFormat.JSON)
            self.assertEqual(EcoSyncConfig.load_from_file(path).location, "Kigali")

    def test_unknown_file_type(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "ecosync.ini"
            path.write_text("name = x")
            with self.assertRaises(ValueError):
                EcoSyncConfig.load_from_file(path)

    def test_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            EcoSyncConfig.load_from_file("/nonexistent/ecosync.yaml")

    def test_non_mapping_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "ecosync.yml"
            path.write_text("- just\n- a list\n")
            with self.assertRaises(ConfigurationError):
                EcoSyncConfig.load_from_file(path)

    def test_merge(self):
        base = EcoSyncConfig(name="base", tariff=TariffConfig(currency="KES"))
        override = EcoSyncConfig(name="override")
        merged = base.merge(override)
        self.assertEqual(merged.name, "override")
        # nested dicts are merged key by key, so the override's defaults win
        self.assertEqual(merged.tariff.currency, "RWF")

    def test_merge_keeps_api_key(self):
        base = EcoSyncConfig(ai_service=AIServiceConfig(api_key="sk-real-key-123456"))
        merged = base.merge(EcoSyncConfig(name="x"))
        self.assertEqual(merged.ai_service.api_key, "sk-real-key-123456")
        self.assertTrue(merged.ai_service.is_configured)
        self.assertEqual(EngineFactory.create_engine(merged.ai_service).active_plugin, "llm_deepseek")

    def test_merge_prefers_other_api_key(self):
        base = EcoSyncConfig(ai_service=AIServiceConfig(api_key="sk-old-key-000000"))
        override = EcoSyncConfig(ai_service=AIServiceConfig(api_key="sk-new-key-999999"))
        self.assertEqual(base.merge(override).ai_service.api_key, "sk-new-key-999999")

    def test_empty_sections_use_defaults(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "ecosync.yaml"
            path.write_text("name: Kigali home\ntariff:\nsimulation:\n")
            loaded = EcoSyncConfig.load_from_file(path)
        self.assertEqual(loaded.name, "Kigali home")
        self.assertEqual(loaded.tariff.currency, "RWF")
        self.assertEqual(loaded.simulation.hours_of_history, 24)


if __name__ == "__main__":
    unittest.main()
