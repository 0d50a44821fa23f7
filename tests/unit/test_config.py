"""Unit tests for client configuration loading."""

import json
import os
from types import MappingProxyType

import pytest

from hashub_vector.config import ClientConfig, load_config, mask_api_key, read_config_file

ENV_VARS = ("HASHUB_API_KEY", "HASHUB_BASE_URL", "HASHUB_TIMEOUT", "HASHUB_MAX_RETRIES")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    # Keep any developer .env out of the picture
    monkeypatch.chdir(tmp_path)
    yield
    # load_dotenv writes straight to os.environ
    for var in ENV_VARS:
        os.environ.pop(var, None)


class TestDefaults:
    def test_only_api_key_yields_documented_defaults(self):
        config = ClientConfig(api_key="k")

        assert config.base_url == "https://api.vector.hashub.dev"
        assert config.timeout == 30.0
        assert config.max_retries == 3
        assert dict(config.extra_headers) == {}

    def test_is_immutable(self):
        config = ClientConfig(api_key="k", extra_headers={"X-A": "1"})

        with pytest.raises(AttributeError):
            config.api_key = "other"  # type: ignore[misc]
        with pytest.raises(TypeError):
            config.extra_headers["X-B"] = "2"  # type: ignore[index]
        assert isinstance(config.extra_headers, MappingProxyType)

    def test_is_hashable(self):
        first = ClientConfig(api_key="k", extra_headers={"X-A": "1", "X-B": "2"})
        second = ClientConfig(api_key="k", extra_headers={"X-B": "2", "X-A": "1"})

        assert first == second
        assert hash(first) == hash(second)
        assert {first: "cached"}[second] == "cached"
        assert hash(ClientConfig(api_key="k")) != hash(ClientConfig(api_key="other"))

    def test_headers_are_copied(self):
        headers = {"X-A": "1"}
        config = ClientConfig(api_key="k", extra_headers=headers)
        headers["X-A"] = "changed"

        assert config.extra_headers["X-A"] == "1"


class TestValidation:
    @pytest.mark.parametrize("api_key", ["", "   "])
    def test_api_key_required(self, api_key):
        with pytest.raises(ValueError, match="api_key"):
            ClientConfig(api_key=api_key)

    @pytest.mark.parametrize("timeout", [0, -1.5])
    def test_timeout_positive(self, timeout):
        with pytest.raises(ValueError, match="timeout"):
            ClientConfig(api_key="k", timeout=timeout)

    @pytest.mark.parametrize("max_retries", [0, -1, 1.5, True])
    def test_max_retries_at_least_one(self, max_retries):
        with pytest.raises(ValueError, match="max_retries"):
            ClientConfig(api_key="k", max_retries=max_retries)

    def test_max_retries_one_is_allowed(self):
        assert ClientConfig(api_key="k", max_retries=1).max_retries == 1


class TestFiles:
    def test_yaml_with_client_section(self, tmp_path):
        path = tmp_path / "hashub.yaml"
        path.write_text(
            "client:\n  api_key: file-key\n  timeout: 5\n  extra_headers:\n    X-Env: prod\n",
            encoding="utf-8",
        )

        config = ClientConfig.from_file(path)

        assert config.api_key == "file-key"
        assert config.timeout == 5
        assert config.max_retries == 3
        assert config.extra_headers == {"X-Env": "prod"}

    def test_flat_json(self, tmp_path):
        path = tmp_path / "hashub.json"
        path.write_text(json.dumps({"api_key": "json-key", "max_retries": 5}), encoding="utf-8")

        config = ClientConfig.from_file(path, base_url="https://other.example.com")

        assert config.api_key == "json-key"
        assert config.max_retries == 5
        assert config.base_url == "https://other.example.com"

    def test_unknown_keys_are_ignored(self, tmp_path):
        path = tmp_path / "hashub.yaml"
        path.write_text("api_key: k\nmodel: gte_base\n", encoding="utf-8")

        assert ClientConfig.from_file(path).api_key == "k"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            read_config_file(tmp_path / "nope.yaml")

    def test_unsupported_suffix(self, tmp_path):
        path = tmp_path / "hashub.toml"
        path.write_text("api_key = 'k'", encoding="utf-8")

        with pytest.raises(ValueError, match="Unsupported"):
            read_config_file(path)

    def test_yaml_round_trip_masks_key(self, tmp_path):
        config = ClientConfig(api_key="hh_live_0123456789abcdef", max_retries=4)
        path = tmp_path / "out.yaml"
        path.write_text(config.to_yaml(), encoding="utf-8")

        values = read_config_file(path)

        assert values["api_key"] == "hh_l...cdef"
        assert values["max_retries"] == 4


class TestLoadConfig:
    def test_env_overrides_file(self, tmp_path, monkeypatch):
        path = tmp_path / "hashub.yaml"
        path.write_text("client:\n  api_key: file-key\n  max_retries: 2\n", encoding="utf-8")
        monkeypatch.setenv("HASHUB_API_KEY", "env-key")
        monkeypatch.setenv("HASHUB_TIMEOUT", "12.5")

        config = load_config(path)

        assert config.api_key == "env-key"
        assert config.timeout == 12.5
        assert config.max_retries == 2

    def test_explicit_overrides_win(self, monkeypatch):
        monkeypatch.setenv("HASHUB_API_KEY", "env-key")
        monkeypatch.setenv("HASHUB_MAX_RETRIES", "7")

        config = load_config(api_key="arg-key", max_retries=None)

        assert config.api_key == "arg-key"
        assert config.max_retries == 7

    def test_dotenv_file_is_read(self, tmp_path):
        (tmp_path / ".env").write_text("HASHUB_API_KEY=dotenv-key\n", encoding="utf-8")

        assert load_config().api_key == "dotenv-key"

    def test_env_ignored_when_disabled(self, monkeypatch):
        monkeypatch.setenv("HASHUB_API_KEY", "env-key")

        with pytest.raises(ValueError, match="api_key"):
            load_config(apply_env=False)

    def test_invalid_env_value(self, monkeypatch):
        monkeypatch.setenv("HASHUB_API_KEY", "k")
        monkeypatch.setenv("HASHUB_MAX_RETRIES", "three")

        with pytest.raises(ValueError, match="HASHUB_MAX_RETRIES"):
            load_config()

    def test_with_env_overrides(self, monkeypatch):
        monkeypatch.setenv("HASHUB_BASE_URL", "https://staging.example.com")

        config = ClientConfig(api_key="k").with_env_overrides()

        assert config.base_url == "https://staging.example.com"
        assert config.api_key == "k"


@pytest.mark.parametrize(
    "key,masked", [("short", "***"), ("hh_live_62e6dbc416cf", "hh_l...16cf")]
)
def test_mask_api_key(key, masked):
    assert mask_api_key(key) == masked
