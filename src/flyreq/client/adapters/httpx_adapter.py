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
"""httpx-based transport adapter."""

from __future__ import annotations

from typing import Any

import httpx

from flyreq.client.options import RequestDescriptor


def _header_value(value: Any) -> str | bytes:
    if isinstance(value, (str, bytes)):
        return value
    return str(value)


class HttpxTransportAdapter:
    """Transport adapter backed by a fresh httpx.AsyncClient per request.

    The client never reads proxy settings from the environment itself
    (``trust_env=False``): the descriptor's agent alone decides whether the
    request is proxied. No timeout is applied and redirects are not followed.

    Args:
        transport: Base transport to use instead of a real connection,
            e.g. ``httpx.MockTransport`` in tests. When given, proxy agents
            are ignored.
    """

    def __init__(self, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._transport = transport

    async def send(self, descriptor: RequestDescriptor) -> httpx.Response:
        """Send the descriptor and return the response with its body buffered."""
        async with httpx.AsyncClient(
            transport=self._transport_for(descriptor),
            timeout=None,
            trust_env=False,
            follow_redirects=False,
        ) as client:
            request = client.build_request(
                descriptor.method,
                descriptor.url,
                headers={k: _header_value(v) for k, v in descriptor.headers.items()},
                content=descriptor.payload,
            )
            return await client.send(request)

    def _transport_for(self, descriptor: RequestDescriptor) -> httpx.AsyncBaseTransport:
        if self._transport is not None:
            return self._transport
        if descriptor.agent is not None:
            return httpx.AsyncHTTPTransport(proxy=httpx.Proxy(descriptor.agent.url))
        return httpx.AsyncHTTPTransport()
