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
"""Request dispatcher: one HTTP(S) request, one callback."""

from __future__ import annotations

import asyncio
import json
import time
from collections.abc import Callable, Mapping
from typing import Any

import httpx

from flyreq.client.adapters.httpx_adapter import HttpxTransportAdapter
from flyreq.client.completion import Completion, Outcome
from flyreq.client.headers import create_headers
from flyreq.client.options import VALID_METHODS, RequestDescriptor, RequestOptions, encode_body
from flyreq.client.ports.outbound import TransportPort
from flyreq.client.proxy import (
    NoProxyPredicate,
    ProxyAgent,
    ProxyProvider,
    environment_proxy_settings,
    no_proxy_match,
    no_proxy_settings,
)
from flyreq.config.properties.client import ClientProperties
from flyreq.core.config import Config
from flyreq.kernel.exceptions import (
    HttpStatusException,
    InvalidMethodException,
    InvalidProtocolException,
    InvalidProxyException,
    InvalidUriException,
    MissingCallbackException,
    MissingEndpointException,
)
from flyreq.logging.port import LoggingPort
from flyreq.logging.structlog_adapter import StructlogAdapter

Callback = Callable[..., Any]
Endpoint = str | httpx.URL
Options = Mapping[str, Any] | RequestOptions


class Dispatcher:
    """Issues single HTTP(S) requests and reports through a callback.

    Usage:
        def on_done(error, response=None, body=None):
            ...

        task = Dispatcher().request("https://example.com/x", {"json": True}, on_done)

    The callback is called once, either with ``error`` alone (validation and
    transport failures) or with ``(error, response, body)``. Status codes of
    400 and above arrive as HttpStatusException together with the response
    and raw body.

    Args:
        transport: Sends descriptors; defaults to HttpxTransportAdapter.
        proxy_provider: Returns the proxy settings in force for a call.
        no_proxy: Returns True for hostnames that must bypass the proxy.
        logging_port: Supplies the ``flyreq.client`` logger; defaults to
            StructlogAdapter.
    """

    def __init__(
        self,
        transport: TransportPort | None = None,
        proxy_provider: ProxyProvider | None = None,
        no_proxy: NoProxyPredicate | None = None,
        logging_port: LoggingPort | None = None,
    ) -> None:
        self._transport: TransportPort = transport or HttpxTransportAdapter()
        self._proxy_provider: ProxyProvider = proxy_provider or environment_proxy_settings
        self._no_proxy: NoProxyPredicate = no_proxy or no_proxy_match
        self._logger = (logging_port or StructlogAdapter()).get_logger("flyreq.client")
        # In-flight exchanges; the event loop only holds weak references.
        self._tasks: set[asyncio.Task[Outcome]] = set()

    @classmethod
    def from_config(
        cls,
        config: Config,
        transport: TransportPort | None = None,
        logging_port: LoggingPort | None = None,
    ) -> Dispatcher:
        """Build a dispatcher from ``flyreq.client.*`` properties."""
        props = config.bind(ClientProperties)
        provider = environment_proxy_settings if props.trust_env else no_proxy_settings
        return cls(transport=transport, proxy_provider=provider, logging_port=logging_port)

    def request(
        self,
        endpoint: Endpoint,
        options: Options | Callback | None = None,
        callback: Callback | None = None,
    ) -> asyncio.Task[Outcome] | None:
        """Send one request and deliver the result to *callback*.

        Raises MissingEndpointException or MissingCallbackException before any
        other work. Every later failure goes to the callback. Returns the task
        running the exchange, or None when validation already completed the
        call.
        """
        if not endpoint or callable(endpoint):
            raise MissingEndpointException("Missing target endpoint", code="MISSING_ENDPOINT")

        cb: Callback | None = None
        raw_options: Options | None = None
        if callable(options):
            cb = options
        elif options is None or isinstance(options, (Mapping, RequestOptions)):
            raw_options = options
            if callable(callback):
                cb = callback
        if cb is None:
            raise MissingCallbackException("Missing request callback", code="MISSING_CALLBACK")

        opts = RequestOptions.from_mapping(raw_options)
        completion = Completion(cb)

        descriptor = self._build(endpoint, opts, completion)
        if descriptor is None:
            return None

        loop = asyncio.get_running_loop()
        task = loop.create_task(self._exchange(descriptor, opts.json, completion))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def get(
        self,
        endpoint: Endpoint,
        options: Options | Callback | None = None,
        callback: Callback | None = None,
    ) -> asyncio.Task[Outcome] | None:
        """Send a GET request."""
        return self._request_with_method("GET", endpoint, options, callback)

    def post(
        self,
        endpoint: Endpoint,
        options: Options | Callback | None = None,
        callback: Callback | None = None,
    ) -> asyncio.Task[Outcome] | None:
        """Send a POST request."""
        return self._request_with_method("POST", endpoint, options, callback)

    def _request_with_method(
        self,
        method: str,
        endpoint: Endpoint,
        options: Options | Callback | None,
        callback: Callback | None,
    ) -> asyncio.Task[Outcome] | None:
        # Caller options are merged last, so their method wins.
        merged: dict[str, Any] = {"method": method}
        if callable(options):
            callback = options
        elif isinstance(options, RequestOptions):
            merged.update(options.as_dict())
        elif isinstance(options, Mapping):
            merged.update(options)
        return self.request(endpoint, merged, callback)

    def _build(
        self,
        endpoint: Any,
        opts: RequestOptions,
        completion: Completion,
    ) -> RequestDescriptor | None:
        """Validate the call and build its descriptor; failures go to *completion*."""
        if not isinstance(endpoint, (str, httpx.URL)):
            return self._reject(completion, InvalidUriException(f"Invalid URI {endpoint}", code="INVALID_URI"))

        method = opts.method or "GET"
        if method not in VALID_METHODS:
            return self._reject(
                completion, InvalidMethodException(f"Invalid Method {method}", code="INVALID_METHOD")
            )

        try:
            url = httpx.URL(endpoint)
        except httpx.InvalidURL as exc:
            return self._reject(completion, exc)

        headers = create_headers(opts.headers)

        scheme = url.scheme
        if scheme not in ("http", "https"):
            return self._reject(
                completion, InvalidProtocolException(f"Invalid Protocol {scheme}", code="INVALID_PROTOCOL")
            )

        agent: ProxyAgent | None = None
        proxy_uri = self._proxy_provider().for_scheme(scheme)
        if proxy_uri and not self._no_proxy(url.host):
            try:
                agent = ProxyAgent.from_uri(proxy_uri, scheme)
            except (httpx.InvalidURL, InvalidProxyException) as exc:
                return self._reject(completion, exc)
            self._logger.debug("http_proxy_selected", host=url.host, proxy_host=agent.url.host, proxy_port=agent.url.port)

        content = encode_body(opts.body, headers)
        return RequestDescriptor(method=method, url=url, headers=headers, content=content, agent=agent)

    def _reject(self, completion: Completion, error: Exception) -> None:
        self._logger.debug("http_request_rejected", error=str(error), error_type=type(error).__name__)
        completion.fail(error)
        return None

    async def _exchange(
        self,
        descriptor: RequestDescriptor,
        decode_json: bool,
        completion: Completion,
    ) -> Outcome:
        start = time.perf_counter()
        try:
            response = await self._transport.send(descriptor)
        except Exception as exc:
            # Not only httpx.HTTPError: h11 protocol errors and header
            # encoding errors escape httpx unwrapped.
            self._logger.warning(
                "http_request_failed",
                method=descriptor.method,
                url=str(descriptor.url),
                duration_ms=round((time.perf_counter() - start) * 1000, 2),
                error=str(exc),
                error_type=type(exc).__name__,
            )
            return completion.fail(exc)

        raw_body = response.text
        self._logger.debug(
            "http_request",
            method=descriptor.method,
            url=str(descriptor.url),
            status_code=response.status_code,
            proxied=descriptor.agent is not None,
            duration_ms=round((time.perf_counter() - start) * 1000, 2),
        )

        if response.status_code >= 400:
            error = HttpStatusException(response.reason_phrase, response=response, body=raw_body)
            return completion.resolve(error, response, raw_body)

        if decode_json and raw_body:
            try:
                parsed = json.loads(raw_body)
            except json.JSONDecodeError as exc:
                return completion.resolve(exc, response, None)
            return completion.resolve(None, response, parsed)

        return completion.resolve(None, response, raw_body)


_default = Dispatcher()


def request(
    endpoint: Endpoint,
    options: Options | Callback | None = None,
    callback: Callback | None = None,
) -> asyncio.Task[Outcome] | None:
    """Send one request through the default dispatcher."""
    return _default.request(endpoint, options, callback)


def get(
    endpoint: Endpoint,
    options: Options | Callback | None = None,
    callback: Callback | None = None,
) -> asyncio.Task[Outcome] | None:
    """Send a GET request through the default dispatcher."""
    return _default.get(endpoint, options, callback)


def post(
    endpoint: Endpoint,
    options: Options | Callback | None = None,
    callback: Callback | None = None,
) -> asyncio.Task[Outcome] | None:
    """Send a POST request through the default dispatcher."""
    return _default.post(endpoint, options, callback)
