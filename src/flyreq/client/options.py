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
"""Per-call request options and the request descriptor built from them."""

from __future__ import annotations

import copy
import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import httpx

from flyreq.client.proxy import ProxyAgent

VALID_METHODS: tuple[str, ...] = ("HEAD", "GET", "POST", "PUT", "DELETE")
UPDATE_METHODS: tuple[str, ...] = ("POST", "PUT")

JSON_CONTENT_TYPE = "application/json"


@dataclass(frozen=True)
class RequestOptions:
    """Immutable options for a single request.

    Attributes:
        method: HTTP verb. Empty means GET.
        headers: Request headers, any casing.
        json: Decode a non-empty response body as JSON.
        body: ``str``/``bytes`` sent as-is, anything else JSON-encoded.
    """

    method: str | None = None
    headers: Mapping[str, Any] = field(default_factory=dict)
    json: bool = False
    body: Any = None

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any] | RequestOptions | None) -> RequestOptions:
        """Build options from a deep copy of *options*; unknown keys are ignored."""
        if options is None:
            return cls()
        if isinstance(options, RequestOptions):
            return copy.deepcopy(options)
        data = copy.deepcopy(dict(options))
        headers = data.get("headers")
        return cls(
            method=data.get("method") or None,
            headers=headers if headers is not None else {},
            json=bool(data.get("json", False)),
            body=data.get("body"),
        )

    def as_dict(self) -> dict[str, Any]:
        """Return the fields that were actually set."""
        out: dict[str, Any] = {}
        if self.method:
            out["method"] = self.method
        if self.headers:
            out["headers"] = dict(self.headers)
        if self.json:
            out["json"] = True
        if self.body is not None:
            out["body"] = self.body
        return out


def encode_body(body: Any, headers: dict[str, Any]) -> bytes | None:
    """Encode *body* for the wire, updating *headers* in place.

    Structured values become compact JSON and default ``content-type`` to
    ``application/json``. ``content-length`` is always set when a body exists.
    """
    if body is None or body == "" or body == b"":
        return None
    if isinstance(body, (bytes, bytearray)):
        data = bytes(body)
    elif isinstance(body, str):
        data = body.encode("utf-8")
    else:
        data = json.dumps(body, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
        if not headers.get("content-type"):
            headers["content-type"] = JSON_CONTENT_TYPE
    headers["content-length"] = str(len(data))
    return data


@dataclass(frozen=True)
class RequestDescriptor:
    """Everything needed to put one request on the wire."""

    method: str
    url: httpx.URL
    headers: Mapping[str, Any] = field(default_factory=dict)
    content: bytes | None = None
    agent: ProxyAgent | None = None

    @property
    def payload(self) -> bytes | None:
        """Bytes written to the request stream. Only POST and PUT carry a body."""
        if self.method in UPDATE_METHODS:
            return self.content
        return None
