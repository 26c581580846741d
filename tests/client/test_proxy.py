"""Tests for proxy settings and the no-proxy predicate."""

import httpx
import pytest

from flyreq.client.proxy import (
    ProxyAgent,
    ProxySettings,
    environment_proxy_settings,
    no_proxy_match,
    no_proxy_settings,
)
from flyreq.kernel.exceptions import InvalidProxyException


class TestEnvironmentProxySettings:
    def test_reads_upper_case(self):
        settings = environment_proxy_settings({"HTTP_PROXY": "http://p:1", "HTTPS_PROXY": "http://p:2"})
        assert settings == ProxySettings(http="http://p:1", https="http://p:2")

    def test_reads_lower_case(self):
        settings = environment_proxy_settings({"http_proxy": "http://p:1", "https_proxy": "http://p:2"})
        assert settings.for_scheme("http") == "http://p:1"
        assert settings.for_scheme("https") == "http://p:2"

    def test_upper_case_wins(self):
        settings = environment_proxy_settings({"HTTP_PROXY": "http://upper", "http_proxy": "http://lower"})
        assert settings.http == "http://upper"

    def test_empty_value_falls_through(self):
        settings = environment_proxy_settings({"HTTP_PROXY": "", "http_proxy": "http://lower"})
        assert settings.http == "http://lower"

    def test_nothing_set(self):
        assert environment_proxy_settings({}) == ProxySettings()

    def test_reads_process_environment(self, monkeypatch):
        monkeypatch.setenv("HTTPS_PROXY", "http://secure-proxy:3128")
        assert environment_proxy_settings().https == "http://secure-proxy:3128"

    def test_unknown_scheme_has_no_proxy(self):
        assert ProxySettings(http="http://p").for_scheme("ftp") is None

    def test_no_proxy_settings_provider(self):
        assert no_proxy_settings() == ProxySettings()


class TestNoProxyMatch:
    @pytest.mark.parametrize(
        ("no_proxy", "host", "expected"),
        [
            ("example.com", "example.com", True),
            ("example.com", "api.example.com", True),
            (".example.com", "api.example.com", True),
            ("example.com", "badexample.com", False),
            ("localhost,127.0.0.1", "127.0.0.1", True),
            ("internal:8080", "internal", True),
            ("*", "anything.test", True),
            (" a.test , b.test ", "b.test", True),
            ("a.test", "b.test", False),
        ],
    )
    def test_matching(self, no_proxy, host, expected):
        assert no_proxy_match(host, {"NO_PROXY": no_proxy}) is expected

    def test_case_insensitive(self):
        assert no_proxy_match("API.Example.COM", {"no_proxy": "example.com"}) is True

    def test_unset_never_matches(self):
        assert no_proxy_match("example.com", {}) is False

    def test_empty_host_never_matches(self):
        assert no_proxy_match("", {"NO_PROXY": "*"}) is False


class TestProxyAgent:
    def test_from_uri(self):
        agent = ProxyAgent.from_uri("http://proxy:8080", "https")
        assert agent.url == httpx.URL("http://proxy:8080")
        assert agent.url.port == 8080
        assert agent.scheme == "https"

    def test_socks_proxy_is_accepted(self):
        assert ProxyAgent.from_uri("socks5://proxy:1080", "http").url.scheme == "socks5"

    @pytest.mark.parametrize("uri", ["proxy.local:3128", "ftp://proxy:21", "http://"])
    def test_unusable_proxy_uri_is_rejected(self, uri):
        with pytest.raises((InvalidProxyException, httpx.InvalidURL)):
            ProxyAgent.from_uri(uri, "http")

    def test_scheme_less_proxy_reports_invalid_proxy(self):
        with pytest.raises(InvalidProxyException, match="Invalid Proxy proxy.local:3128") as info:
            ProxyAgent.from_uri("proxy.local:3128", "http")
        assert info.value.code == "INVALID_PROXY"
