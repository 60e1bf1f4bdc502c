"""Static file server behind ``saru run``.

Serves a generated project directory over HTTP until a stop event is set.
Signals are translated into that event by ``install_signal_handlers``; the
server itself never looks at process-wide state.
"""

from __future__ import annotations

import asyncio
import functools
import json
import signal
from http.server import SimpleHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from rich.text import Text

from saru_cli.errors import ServerError
from saru_cli.scaffolder.generator import DEFAULT_PORT, MANIFEST_FILE
from saru_cli.utils import check_port_available, console, load_json, print_warning


class _ProjectRequestHandler(SimpleHTTPRequestHandler):
    def log_message(self, format: str, *args: Any) -> None:
        line = Text(f"{self.address_string()} - {format % args}", style="dim")
        console.print(line, highlight=False)


class RunSettings(BaseModel):
    """The part of ``saru.json`` that ``saru run`` reads.

    Only ``port`` matters here. Other keys, including the ones written by
    ``create``, are kept but not required, so a hand-edited manifest still
    serves.
    """

    model_config = ConfigDict(extra="allow")

    port: int | None = Field(default=None, ge=0, le=65535)


def read_manifest(directory: str | Path) -> RunSettings:
    """Load and validate ``saru.json`` from *directory*.

    Raises:
        ServerError: If the file is missing or malformed.
    """
    path = Path(directory) / MANIFEST_FILE
    if not path.is_file():
        raise ServerError(f"{MANIFEST_FILE} not found in {Path(directory).resolve()}")
    try:
        return RunSettings.model_validate(load_json(path))
    except json.JSONDecodeError as exc:
        raise ServerError(f"{MANIFEST_FILE} is not valid JSON: {exc}")
    except ValidationError as exc:
        raise ServerError(f"{MANIFEST_FILE} is invalid: {exc.errors()[0]['msg']}")


def resolve_port(cli_port: str | int | None, manifest: RunSettings | None = None) -> int:
    """Pick the port: CLI argument, then the manifest, then 2017."""
    if cli_port is not None and cli_port != "":
        try:
            port = int(cli_port)
        except (TypeError, ValueError):
            raise ServerError(f"Invalid port: {cli_port!r}")
    elif manifest is not None and manifest.port is not None:
        port = manifest.port
    else:
        port = DEFAULT_PORT

    if not 0 <= port <= 65535:
        raise ServerError(f"Port out of range: {port}")
    return port


class StaticServer:
    """Threaded HTTP server for one project directory.

    ``port`` is updated with the bound port once ``ready`` is set, which
    matters when binding to port 0.
    """

    def __init__(self, directory: str | Path, port: int, host: str = "") -> None:
        self.directory = Path(directory).resolve()
        self.host = host
        self.port = port
        self.ready = asyncio.Event()

    @property
    def url(self) -> str:
        return f"http://{self.host or 'localhost'}:{self.port}/"

    async def serve(self, stop: asyncio.Event) -> None:
        """Serve until *stop* is set.

        Raises:
            ServerError: If the socket cannot be bound.
        """
        handler = functools.partial(_ProjectRequestHandler, directory=str(self.directory))
        try:
            httpd = ThreadingHTTPServer((self.host, self.port), handler)
        except OSError as exc:
            raise ServerError(f"Cannot listen on port {self.port}: {exc.strerror or exc}")

        self.port = httpd.server_address[1]
        worker = asyncio.create_task(asyncio.to_thread(httpd.serve_forever))
        self.ready.set()
        try:
            await stop.wait()
        finally:
            await asyncio.to_thread(httpd.shutdown)
            await worker
            httpd.server_close()


def install_signal_handlers(stop: asyncio.Event) -> None:
    """Set *stop* when SIGINT or SIGTERM arrives."""
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop.set)
        except NotImplementedError:
            signal.signal(sig, lambda *_: loop.call_soon_threadsafe(stop.set))


async def run_server(
    cli_port: str | None = None,
    directory: str | Path = ".",
    stop: asyncio.Event | None = None,
) -> None:
    """Entry point of ``saru run``.

    Raises:
        ServerError: On a missing manifest, a bad port or a bind failure.
    """
    manifest = read_manifest(directory)
    port = resolve_port(cli_port, manifest)

    if port and not await check_port_available(port):
        print_warning(f"Port {port} already has a listener")

    if stop is None:
        stop = asyncio.Event()
        install_signal_handlers(stop)

    server = StaticServer(directory, port)
    console.print(f"[blue]Starting server, port: {port}[/blue]")
    await server.serve(stop)
    console.print("[blue]Server stopped[/blue]")
