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
"""Proxy selection from the process environment."""

from __future__ import annotations

import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass

import httpx

from flyreq.kernel.exceptions import InvalidProxyException

# Proxy URL schemes accepted by httpx.Proxy.
PROXY_SCHEMES: tuple[str, ...] = ("http", "https", "socks5", "socks5h")

HTTP_PROXY_VARS: tuple[str, ...] = ("HTTP_PROXY", "http_proxy")
HTTPS_PROXY_VARS: tuple[str, ...] = ("HTTPS_PROXY", "https_proxy")
NO_PROXY_VARS: tuple[str, ...] = ("NO_PROXY", "no_proxy")


@dataclass(frozen=True)
class ProxySettings:
    """Proxy URIs per target scheme; ``None`` means connect directly."""

    http: str | None = None
    https: str | None = None

    def for_scheme(self, scheme: str) -> str | None:
        if scheme == "http":
            return self.http
        if scheme == "https":
            return self.https
        return None


@dataclass(frozen=True)
class ProxyAgent:
    """Forwarding agent that routes a request through a proxy server."""

    url: httpx.URL
    scheme: str

    @classmethod
    def from_uri(cls, uri: str, scheme: str) -> ProxyAgent:
        """Build an agent for *scheme* targets.

        Raises httpx.InvalidURL for an unparseable URI and
        InvalidProxyException when the URI has no proxy scheme httpx can
        dial (``proxy.local:3128`` is rejected, ``http://proxy.local:3128``
        is not).
        """
        url = httpx.URL(uri)
        if url.scheme not in PROXY_SCHEMES or not url.host:
            raise InvalidProxyException(
                f"Invalid Proxy {uri}", code="INVALID_PROXY", context={"scheme": scheme}
            )
        return cls(url=url, scheme=scheme)


ProxyProvider = Callable[[], ProxySettings]
NoProxyPredicate = Callable[[str], bool]


def _first_set(names: tuple[str, ...], environ: Mapping[str, str]) -> str | None:
    for name in names:
        value = environ.get(name)
        if value:
            return value
    return None


def environment_proxy_settings(environ: Mapping[str, str] | None = None) -> ProxySettings:
    """Read proxy settings from the environment at call time."""
    env = os.environ if environ is None else environ
    return ProxySettings(
        http=_first_set(HTTP_PROXY_VARS, env),
        https=_first_set(HTTPS_PROXY_VARS, env),
    )


def no_proxy_settings() -> ProxySettings:
    """Provider that never proxies."""
    return ProxySettings()


def no_proxy_match(hostname: str, environ: Mapping[str, str] | None = None) -> bool:
    """Return True when *hostname* is excluded from proxying by ``NO_PROXY``.

    ``*`` excludes every host. Other entries match the host itself or any of
    its subdomains; a leading dot and a trailing ``:port`` are ignored.
    """
    env = os.environ if environ is None else environ
    raw = _first_set(NO_PROXY_VARS, env)
    if not raw or not hostname:
        return False
    host = hostname.lower().rstrip(".")
    for entry in raw.split(","):
        entry = entry.strip().lower()
        if not entry:
            continue
        if entry == "*":
            return True
        # host:port, but not a bare IPv6 address
        if entry.count(":") == 1:
            entry = entry.split(":", 1)[0]
        entry = entry.strip(".")
        if host == entry or host.endswith("." + entry):
            return True
    return False
