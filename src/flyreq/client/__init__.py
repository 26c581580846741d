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
"""flyreq Client — single-request HTTP(S) helper with callback completion."""

from flyreq.client.completion import Completion, Outcome
from flyreq.client.dispatcher import Dispatcher, get, post, request
from flyreq.client.headers import create_headers
from flyreq.client.options import RequestDescriptor, RequestOptions
from flyreq.client.ports.outbound import TransportPort
from flyreq.client.proxy import ProxyAgent, ProxySettings, environment_proxy_settings, no_proxy_match

__all__ = [
    "Completion",
    "Dispatcher",
    "Outcome",
    "ProxyAgent",
    "ProxySettings",
    "RequestDescriptor",
    "RequestOptions",
    "TransportPort",
    "create_headers",
    "environment_proxy_settings",
    "get",
    "no_proxy_match",
    "post",
    "request",
]
