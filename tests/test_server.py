"""Unit tests for the static server (saru_cli.server).

Tests cover:
- read_manifest (missing, invalid JSON, invalid fields)
- resolve_port precedence
- StaticServer serving files and stopping on the stop event
- run_server end to end with an explicit stop event
"""

from __future__ import annotations

import asyncio
import json
import socket
from pathlib import Path

import httpx
import pytest

from saru_cli.errors import ServerError
from saru_cli.server import (
    RunSettings,
    StaticServer,
    _ProjectRequestHandler,
    read_manifest,
    resolve_port,
    run_server,
)

pytestmark = pytest.mark.unit


def _write_manifest(root: Path, **data) -> None:
    payload = {"name": "MyApp", "author": "dev", "port": 2017}
    payload.update(data)
    (root / "saru.json").write_text(json.dumps(payload), encoding="utf-8")


class TestReadManifest:
    def test_missing(self, tmp_path: Path):
        with pytest.raises(ServerError, match="saru.json not found"):
            read_manifest(tmp_path)

    def test_invalid_json(self, tmp_path: Path):
        (tmp_path / "saru.json").write_text("{", encoding="utf-8")
        with pytest.raises(ServerError, match="not valid JSON"):
            read_manifest(tmp_path)

    def test_invalid_fields(self, tmp_path: Path):
        _write_manifest(tmp_path, port="not-a-port")
        with pytest.raises(ServerError, match="invalid"):
            read_manifest(tmp_path)

    def test_valid(self, tmp_path: Path):
        _write_manifest(tmp_path, port=9000)
        assert read_manifest(tmp_path).port == 9000

    def test_only_port_is_required(self, tmp_path: Path):
        (tmp_path / "saru.json").write_text(json.dumps({"port": 8081}), encoding="utf-8")
        assert read_manifest(tmp_path).port == 8081

    def test_extra_keys_kept(self, tmp_path: Path):
        _write_manifest(tmp_path, description="hand edited")
        settings = read_manifest(tmp_path)
        assert settings.port == 2017
        assert settings.model_extra["description"] == "hand edited"

    def test_empty_object_falls_back_to_default_port(self, tmp_path: Path):
        (tmp_path / "saru.json").write_text("{}", encoding="utf-8")
        assert resolve_port(None, read_manifest(tmp_path)) == 2017


class TestResolvePort:
    def test_cli_argument_wins(self):
        assert resolve_port("8080", RunSettings(port=9000)) == 8080

    def test_manifest_port(self):
        assert resolve_port(None, RunSettings(port=9000)) == 9000

    def test_default(self):
        assert resolve_port(None, None) == 2017

    def test_manifest_without_port(self):
        assert resolve_port(None, RunSettings(name="a")) == 2017

    def test_not_a_number(self):
        with pytest.raises(ServerError, match="Invalid port"):
            resolve_port("eighty")

    def test_out_of_range(self):
        with pytest.raises(ServerError, match="out of range"):
            resolve_port("70000")


class TestStaticServer:
    @pytest.mark.asyncio
    async def test_serves_until_stopped(self, tmp_path: Path):
        (tmp_path / "index.html").write_text("<title>MyApp</title>", encoding="utf-8")
        stop = asyncio.Event()
        server = StaticServer(tmp_path, port=0, host="127.0.0.1")
        task = asyncio.create_task(server.serve(stop))

        await asyncio.wait_for(server.ready.wait(), timeout=5)
        async with httpx.AsyncClient(trust_env=False) as client:
            response = await client.get(f"{server.url}index.html")
        assert response.status_code == 200
        assert "MyApp" in response.text

        stop.set()
        await asyncio.wait_for(task, timeout=5)

    @pytest.mark.asyncio
    async def test_bind_failure(self, tmp_path: Path):
        occupant = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        occupant.bind(("127.0.0.1", 0))
        occupant.listen(1)
        try:
            server = StaticServer(tmp_path, port=occupant.getsockname()[1], host="127.0.0.1")
            with pytest.raises(ServerError, match="Cannot listen"):
                await server.serve(asyncio.Event())
        finally:
            occupant.close()


class TestRunServer:
    @pytest.mark.asyncio
    async def test_missing_manifest(self, tmp_path: Path):
        with pytest.raises(ServerError):
            await run_server(None, directory=tmp_path, stop=asyncio.Event())

    @pytest.mark.asyncio
    async def test_starts_and_stops(self, tmp_path: Path, capsys):
        _write_manifest(tmp_path)
        stop = asyncio.Event()
        stop.set()
        await asyncio.wait_for(run_server("0", directory=tmp_path, stop=stop), timeout=5)
        out = capsys.readouterr().out
        assert "Starting server, port: 0" in out
        assert "Server stopped" in out

    @pytest.mark.asyncio
    async def test_manifest_without_author(self, tmp_path: Path, capsys):
        (tmp_path / "saru.json").write_text(json.dumps({"name": "MyApp"}), encoding="utf-8")
        stop = asyncio.Event()
        stop.set()
        await asyncio.wait_for(run_server("0", directory=tmp_path, stop=stop), timeout=5)
        assert "Server stopped" in capsys.readouterr().out


class TestRequestLog:
    def test_brackets_in_request_line(self, capsys):
        handler = _ProjectRequestHandler.__new__(_ProjectRequestHandler)
        handler.client_address = ("127.0.0.1", 50000)
        handler.log_message('"%s" %s %s', "GET /[/dim]x[b] HTTP/1.1", "404", "-")
        out = capsys.readouterr().out
        assert "GET /[/dim]x[b] HTTP/1.1" in out
