"""Tests for config loading and saving."""

import json

import pytest

from einsteinbot.cache import create_cache
from einsteinbot.config import Config, load_config, save_config
from einsteinbot.config.loader import convert_keys, convert_to_camel


class TestLoadConfig:
    def test_missing_file_gives_defaults(self, tmp_path):
        config = load_config(tmp_path / "absent.json")
        assert config.cache.backend == "memory"
        assert config.cache.ttl_seconds == 259140
        assert config.http.timeout_seconds == 30.0
        assert config.integration_name is None

    def test_camel_case_file(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({
            "auth": {"connectedAppId": "app", "userId": "bot@example.com"},
            "bot": {"orgId": "00D1", "botId": "0Xx1", "forceConfigEndpoint": "https://org.example.com"},
            "cache": {"backend": "redis", "redisUrl": "redis://cache:6379", "ttlSeconds": 60},
            "integrationName": "Slack",
        }))

        config = load_config(path)

        assert config.auth.connected_app_id == "app"
        assert config.bot.force_config_endpoint == "https://org.example.com"
        assert config.cache.redis_url == "redis://cache:6379"
        assert config.cache.ttl_seconds == 60
        assert create_cache(config.cache).ttl_seconds == 60
        assert config.integration_name == "Slack"

        request_config = config.request_config()
        assert request_config.org_id == "00D1"
        assert request_config.bot_id == "0Xx1"

    def test_corrupt_file_falls_back_to_defaults(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{not json")
        assert load_config(path).cache.backend == "memory"

    def test_save_writes_camel_case(self, tmp_path):
        path = tmp_path / "nested" / "config.json"
        config = Config()
        config.bot.org_id = "00D9"

        save_config(config, path)

        data = json.loads(path.read_text())
        assert data["bot"]["orgId"] == "00D9"
        assert "ttlSeconds" in data["cache"]
        assert load_config(path).bot.org_id == "00D9"

    def test_request_config_requires_bot_fields(self):
        with pytest.raises(ValueError):
            Config().request_config()

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("EINSTEINBOT_CACHE__BACKEND", "redis")
        monkeypatch.setenv("EINSTEINBOT_INTEGRATION_NAME", "Teams")
        config = Config()
        assert config.cache.backend == "redis"
        assert config.integration_name == "Teams"


class TestKeyConversion:
    def test_convert_keys_is_recursive(self):
        data = {"bot": {"forceConfigEndpoint": "https://org.example.com"}, "items": [{"ttlSeconds": 5}]}
        assert convert_keys(data) == {
            "bot": {"force_config_endpoint": "https://org.example.com"},
            "items": [{"ttl_seconds": 5}],
        }

    def test_convert_to_camel_is_recursive(self):
        data = {"auth": {"connected_app_secret": "s", "private_key_path": "~/k.pem"}}
        assert convert_to_camel(data) == {
            "auth": {"connectedAppSecret": "s", "privateKeyPath": "~/k.pem"}
        }
