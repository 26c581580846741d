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
"""The 'flyreq request' command: issue one request and print the outcome."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from collections.abc import Callable
from typing import Any

import click
from rich.markup import escape
from rich.table import Table

from flyreq.cli.console import console
from flyreq.client.completion import Outcome
from flyreq.client.dispatcher import Dispatcher
from flyreq.core.config import Config
from flyreq.logging.port import LoggingPort
from flyreq.logging.structlog_adapter import StructlogAdapter

# Replaced in tests to inject a transport or a logging port.
dispatcher_factory: Callable[..., Dispatcher] = Dispatcher.from_config
logging_factory: Callable[[], LoggingPort] = StructlogAdapter


def _parse_headers(raw: tuple[str, ...]) -> dict[str, str]:
    headers: dict[str, str] = {}
    for item in raw:
        name, sep, value = item.partition(":")
        if not sep or not name.strip():
            raise click.BadParameter(f"expected 'Name: value', got {item!r}", param_hint="--header")
        headers.setdefault(name.strip(), value.strip())
    return headers


async def _send(dispatcher: Dispatcher, url: str, options: dict[str, Any]) -> Outcome:
    delivered: list[Outcome] = []

    def on_done(error: BaseException | None, response: Any = None, body: Any = None) -> None:
        delivered.append(Outcome(error, response, body))

    task = dispatcher.request(url, options, on_done)
    if task is not None:
        await task
    return delivered[0]


def _print_response(outcome: Outcome, include: bool) -> None:
    response = outcome.response
    style = "error" if response.status_code >= 400 else "success"
    console.print(f"[{style}]{response.status_code} {response.reason_phrase}[/{style}]")
    if include:
        table = Table(show_header=False, border_style="dim")
        table.add_column("Header", style="info")
        table.add_column("Value")
        for name, value in response.headers.items():
            table.add_row(name, value)
        console.print(table)
    if isinstance(outcome.body, (dict, list)):
        console.print_json(data=outcome.body)
    elif outcome.body:
        console.print(outcome.body, markup=False, highlight=False)


@click.command()
@click.argument("url")
@click.option("-X", "--method", default="GET", show_default=True, help="HTTP method.")
@click.option("-H", "--header", "headers", multiple=True, help="Request header as 'Name: value'.")
@click.option("-d", "--data", default=None, help="Request body, sent as-is.")
@click.option("--json-body", is_flag=True, help="Parse --data as JSON and send it encoded.")
@click.option("--json", "decode_json", is_flag=True, help="Decode the response body as JSON.")
@click.option("-i", "--include", is_flag=True, help="Show response headers.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML or TOML configuration file.",
)
def request_command(
    url: str,
    method: str,
    headers: tuple[str, ...],
    data: str | None,
    json_body: bool,
    decode_json: bool,
    include: bool,
    config_path: Path | None,
) -> None:
    """Send one request to URL."""
    config = Config.from_file(config_path) if config_path else Config()
    logging_port = logging_factory()
    logging_port.configure(config)

    options: dict[str, Any] = {
        "method": method.upper(),
        "headers": _parse_headers(headers),
        "json": decode_json,
    }
    if data is not None:
        if json_body:
            try:
                options["body"] = json.loads(data)
            except json.JSONDecodeError as exc:
                raise click.BadParameter(str(exc), param_hint="--data") from exc
        else:
            options["body"] = data

    outcome = asyncio.run(_send(dispatcher_factory(config, logging_port=logging_port), url, options))

    if outcome.response is not None:
        _print_response(outcome, include)
    if outcome.error is not None:
        console.print(f"[error]{type(outcome.error).__name__}:[/error] {escape(str(outcome.error))}", highlight=False)
        raise SystemExit(1)
