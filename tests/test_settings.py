"""
Tests for run configuration loading.
"""

import json
from unittest.mock import MagicMock

import pytest

import settings
from models.enums import ProviderMode
from settings import ConfigError, RunOptions, load_options


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Run every test in an empty directory with no provider key in the env."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("PROVIDER_KEY", raising=False)
    monkeypatch.delenv("SERPER_API_KEY", raising=False)
    monkeypatch.setattr("settings.load_dotenv", MagicMock())
    return tmp_path


def write_config(path, data):
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


class TestLoadOptions:
    """Tests for load_options."""

    def test_defaults(self):
        options = load_options(queries=["coffee"], provider_key="k")
        assert options.max_results == 500
        assert options.location == "Singapore"
        assert options.language == "en"
        assert options.mode == ProviderMode.SEARCH
        assert options.provider == "serper"
        assert options.output_dir == "./output"
        assert options.page_delay == 1.0
        assert options.resume is True
        assert options.target_domains == []

    def test_config_file_camel_case(self, isolated_env):
        path = write_config(isolated_env / "run.json", {
            "queries": ["coffee", "  ", "tea"],
            "domain": "www.example.com",
            "maxResults": 0,
            "providerKey": "from-file",
            "outputDir": "out",
            "mode": "maps",
        })
        options = load_options(config_path=path)

        assert options.queries == ["coffee", "tea"]
        assert options.domain == "www.example.com"
        assert options.max_results == 0
        assert options.unlimited is True
        assert options.provider_key == "from-file"
        assert options.output_dir == "out"
        assert options.mode == ProviderMode.MAPS

    def test_default_config_json_picked_up(self, isolated_env):
        write_config(isolated_env / "config.json", {"queries": ["coffee"], "providerKey": "k"})
        assert load_options().queries == ["coffee"]

    def test_overrides_win_over_file(self, isolated_env):
        path = write_config(isolated_env / "run.json", {
            "queries": ["coffee"], "maxResults": 100, "providerKey": "k",
        })
        options = load_options(config_path=path, max_results=20, location=None)
        assert options.max_results == 20
        assert options.location == "Singapore"

    def test_provider_key_from_env(self, monkeypatch):
        monkeypatch.setenv("PROVIDER_KEY", "env-key")
        assert load_options(queries=["coffee"]).provider_key == "env-key"

    def test_serper_api_key_env_fallback(self, monkeypatch):
        monkeypatch.setenv("SERPER_API_KEY", "serper-env")
        assert load_options(queries=["coffee"]).provider_key == "serper-env"

    def test_dotenv_loaded(self):
        load_options(queries=["coffee"], provider_key="k")
        settings.load_dotenv.assert_called_once()

    def test_single_query_shorthand(self, isolated_env):
        path = write_config(isolated_env / "run.json", {"query": "coffee", "providerKey": "k"})
        assert load_options(config_path=path).queries == ["coffee"]


class TestConfigErrors:
    """Tests for configuration validation errors."""

    def test_missing_queries(self):
        with pytest.raises(ConfigError, match="No queries"):
            load_options(provider_key="k")

    def test_missing_provider_key(self):
        with pytest.raises(ConfigError, match="Provider key"):
            load_options(queries=["coffee"])

    @pytest.mark.parametrize(
        "domain",
        ["https://example.com", "example.com/path", "-bad.com", "exa mple.com"],
    )
    def test_invalid_domain(self, domain):
        with pytest.raises(ConfigError):
            load_options(queries=["coffee"], provider_key="k", domain=domain)

    def test_invalid_domains_entry(self):
        with pytest.raises(ConfigError):
            load_options(queries=["coffee"], provider_key="k", domains=["ok.com", "http://x.com"])

    def test_negative_max_results(self):
        with pytest.raises(ConfigError):
            load_options(queries=["coffee"], provider_key="k", max_results=-5)

    def test_unknown_mode(self):
        with pytest.raises(ConfigError):
            load_options(queries=["coffee"], provider_key="k", mode="images")

    def test_missing_explicit_file(self):
        with pytest.raises(ConfigError, match="not found"):
            load_options(config_path="nope.json")

    def test_malformed_json(self, isolated_env):
        path = isolated_env / "bad.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_options(config_path=str(path))

    def test_non_object_json(self, isolated_env):
        path = write_config(isolated_env / "list.json", ["coffee"])
        with pytest.raises(ConfigError):
            load_options(config_path=path)


class TestRunOptions:
    """Tests for RunOptions."""

    def test_target_domains_merge(self):
        options = RunOptions(domain="example.com", domains=["other.org", "example.com", ""])
        assert options.target_domains == ["example.com", "other.org"]

    def test_valid_domain_formats(self):
        for domain in ["example.com", "www.example.com", "example", "my-shop.co.uk"]:
            assert RunOptions(domain=domain).domain == domain

    def test_blank_domain_is_none(self):
        assert RunOptions(domain="  ").domain is None
