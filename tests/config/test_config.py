# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Tests for Config loading, env overrides and property binding."""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from secheaders.cache.adapters.memory import InMemoryCache
from secheaders.config.properties.cache import CacheProperties
from secheaders.config.properties.logging import LoggingProperties
from secheaders.core.config import Config
from secheaders.factory import create_security_headers
from secheaders.kernel.exceptions import ConfigurationException, InvalidConfigurationException


def _write(path: Path, text: str) -> Path:
    path.write_text(textwrap.dedent(text))
    return path


class TestConfigLoading:
    def test_defaults_only_when_file_missing(self, tmp_path):
        config = Config.from_file(tmp_path / "missing.yaml")

        assert config.get("secheaders.csp.enabled") is False
        assert config.get("secheaders.hsts.max_age") == 31536000
        assert config.loaded_sources == ["secheaders-defaults.yaml (defaults)"]

    def test_yaml_merges_over_defaults(self, tmp_path):
        path = _write(
            tmp_path / "secheaders.yaml",
            """
            secheaders:
              hsts:
                enabled: true
                preload: true
            """,
        )
        config = Config.from_file(path)

        assert config.get("secheaders.hsts.enabled") is True
        assert config.get("secheaders.hsts.preload") is True
        assert config.get("secheaders.hsts.max_age") == 31536000
        assert str(path) in config.loaded_sources

    def test_toml(self, tmp_path):
        path = _write(
            tmp_path / "secheaders.toml",
            """
            [secheaders.misc]
            frame_options = "DENY"
            """,
        )
        assert Config.from_file(path).get("secheaders.misc.frame_options") == "DENY"

    def test_profile_overlay(self, tmp_path):
        path = _write(tmp_path / "secheaders.yaml", "secheaders:\n  csp:\n    report_only: true\n")
        _write(tmp_path / "secheaders-prod.yaml", "secheaders:\n  csp:\n    report_only: false\n")

        assert Config.from_file(path).get("secheaders.csp.report_only") is True
        assert Config.from_file(path, active_profiles=["prod"]).get("secheaders.csp.report_only") is False

    def test_invalid_yaml_raises(self, tmp_path):
        path = _write(tmp_path / "secheaders.yaml", "secheaders: [unclosed\n")
        with pytest.raises(InvalidConfigurationException) as exc_info:
            Config.from_file(path)
        assert exc_info.value.code == "CONFIG_PARSE"
        assert isinstance(exc_info.value, ConfigurationException)

    def test_non_mapping_top_level_raises(self, tmp_path):
        path = _write(tmp_path / "secheaders.yaml", "- just\n- a list\n")
        with pytest.raises(InvalidConfigurationException) as exc_info:
            Config.from_file(path)
        assert exc_info.value.code == "CONFIG_SHAPE"


class TestConfigGet:
    def test_env_key(self):
        assert Config.env_key("secheaders.csp.enabled") == "SECHEADERS_CSP_ENABLED"
        assert Config.env_key("secheaders.cache.key-prefix") == "SECHEADERS_CACHE_KEY_PREFIX"

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("SECHEADERS_CSP_ENABLED", "true")
        config = Config({"secheaders": {"csp": {"enabled": False}}})
        assert config.get("secheaders.csp.enabled") == "true"

    def test_placeholder_resolution(self, monkeypatch):
        monkeypatch.setenv("REPORT_HOST", "https://reports.example.com")
        config = Config({"secheaders": {"reporting": {"base_url": "${REPORT_HOST}", "other": "${missing:x}"}}})
        assert config.get("secheaders.reporting.base_url") == "https://reports.example.com"
        assert config.get("secheaders.reporting.other") == "x"

    def test_missing_key_returns_default(self):
        assert Config().get("secheaders.nothing.here", "d") == "d"


class TestPropertyBinding:
    def test_cache_properties_defaults(self):
        props = Config.from_file("missing.yaml").bind(CacheProperties)
        assert props.provider == "auto"
        assert props.key_prefix == "secheaders:"
        assert props.redis.url is None

    def test_cache_properties_invalid_provider(self):
        config = Config({"secheaders": {"cache": {"provider": "memcached"}}})
        with pytest.raises(ValueError, match="CacheProperties"):
            config.bind(CacheProperties)

    def test_logging_properties(self):
        config = Config({"secheaders": {"logging": {"format": "json", "level": {"root": "DEBUG"}}}})
        props = config.bind(LoggingProperties)
        assert props.format == "json"
        assert props.level == {"root": "DEBUG"}

    def test_undecorated_class_rejected(self):
        class Plain:
            pass

        with pytest.raises(ValueError, match="config_properties"):
            Config().bind(Plain)


class TestEnvironmentDrivenHeaders:
    @pytest.mark.asyncio
    async def test_json_directive_from_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv("SECHEADERS_CSP_ENABLED", "1")
        monkeypatch.setenv("SECHEADERS_CSP_SCRIPT_SRC", '{"self": true, "nonce_source": true}')
        sh = create_security_headers(Config.from_file(tmp_path / "none.yaml"), backend=InMemoryCache())

        headers: dict[str, str] = {}
        await sh.builder.apply(headers, "xyz")

        assert headers == {"Content-Security-Policy": "script-src 'self' 'nonce-xyz';"}
