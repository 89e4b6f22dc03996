"""Tests for configuration loading."""

import pytest

from fx_recon.config import ReconConfig, generate_default_config, load_config, with_base_currency
from fx_recon.utils.exceptions import ConfigurationError


class TestLoadConfig:
    def test_defaults(self):
        config = load_config()

        assert config.currency.base_currency == "USD"
        assert config.matching.amount_tolerance == 0.01
        assert config.matching.date_tolerance_days == 3
        assert config.matching.lexical.date_amount == 0.05
        assert config.matching.semantic.date_amount == 0.25
        assert config.fx.provider_url == "https://api.frankfurter.app"
        assert config.config_file_path is None

    def test_yaml_is_deep_merged(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "currency:\n  base_currency: eur\nmatching:\n  semantic:\n    date_amount: 0.3\n"
        )

        config = load_config(path)

        assert config.currency.base_currency == "EUR"
        assert config.currency.default_currency == "USD"
        assert config.matching.semantic.date_amount == 0.3
        assert config.matching.semantic.amount_only == 0.55
        assert config.config_file_path == str(path)

    def test_missing_file_uses_defaults(self, tmp_path):
        assert load_config(tmp_path / "absent.yaml") == ReconConfig()

    def test_invalid_currency(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("currency:\n  base_currency: dollars\n")

        with pytest.raises(ConfigurationError):
            load_config(path)

    def test_invalid_threshold(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("matching:\n  lexical:\n    date_only: 1.5\n")

        with pytest.raises(ConfigurationError):
            load_config(path)

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("matching: [unclosed\n")

        with pytest.raises(ConfigurationError):
            load_config(path)


class TestWithBaseCurrency:
    def test_override_is_normalized(self):
        config = ReconConfig()

        updated = with_base_currency(config, " eur ")

        assert updated.currency.base_currency == "EUR"
        assert updated.currency.default_currency == "USD"
        assert config.currency.base_currency == "USD"

    def test_invalid_override_is_rejected(self):
        with pytest.raises(ConfigurationError):
            with_base_currency(ReconConfig(), "dollars")


def test_generated_config_round_trips(tmp_path):
    path = tmp_path / "out" / "config.yaml"
    generate_default_config(path)

    config = load_config(path)

    assert config.matching == ReconConfig().matching
