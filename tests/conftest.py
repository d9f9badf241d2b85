# tests/conftest.py
import asyncio
import socket
from collections.abc import AsyncGenerator
from typing import Any, Dict, List, Optional, Union

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer
from httpx import ASGITransport, AsyncClient

from tribler_arr_shim.clients import TriblerClient
from tribler_arr_shim.config import TriblerConfig
from tribler_arr_shim.database import build_engine, build_session_factory, init_db
from tribler_arr_shim.main import app as fastapi_app, attach_services
from tribler_arr_shim.services import AssociationStore

API_KEY = "test-api-key"
DOWNLOAD_DIR = "/data/downloads"


def make_download(infohash: str, name: str = "", status: str = "DOWNLOADING", **overrides) -> Dict[str, Any]:
    """A GET /downloads entry shaped like Tribler's."""
    download = {
        "infohash": infohash,
        "name": name or f"torrent-{infohash}",
        "status": status,
        "status_code": 3,
        "destination": DOWNLOAD_DIR,
        "size": 1024,
        "progress": 0.5,
        "num_peers": 4,
        "num_seeds": 2,
        "speed_down": 2048,
        "speed_up": 512,
        "eta": 60.0,
        "hops": 2,
        "anon_download": True,
        "safe_seeding": True,
        "all_time_ratio": 0.0,
        "trackers": [],
        "error": "",
    }
    download.update(overrides)
    return download


class FakeTribler:
    """In-process stand-in for the Tribler REST API."""

    def __init__(self):
        self.downloads: List[Dict[str, Any]] = []
        self.files: Dict[str, List[Dict[str, Any]]] = {}
        self.requests: List[Dict[str, Any]] = []
        self.states: Dict[str, str] = {}
        self.next_infohash = "c0ffee" * 6 + "c0ff"
        self.fail_status: Optional[int] = None
        self.raw_body: Optional[Union[str, bytes]] = None
        self.delay: float = 0
        self.url = ""

    def make_app(self) -> web.Application:
        app = web.Application()
        app.router.add_route("*", "/{tail:.*}", self.handle)
        return app

    def _find(self, infohash: str) -> Optional[Dict[str, Any]]:
        return next((d for d in self.downloads if d["infohash"] == infohash), None)

    async def handle(self, request: web.Request) -> web.Response:
        body = await request.json() if request.can_read_body else None
        self.requests.append({
            "method": request.method,
            "path": request.path,
            "query": dict(request.query),
            "body": body,
            "api_key": request.headers.get("X-Api-Key"),
        })

        if self.delay:
            await asyncio.sleep(self.delay)
        if request.headers.get("X-Api-Key") != API_KEY:
            return web.json_response({"error": "Unauthorized access"}, status=401)
        if self.fail_status:
            return web.Response(status=self.fail_status, text="engine exploded")
        if self.raw_body is not None:
            body = self.raw_body.encode() if isinstance(self.raw_body, str) else self.raw_body
            return web.Response(body=body, content_type="application/json")

        parts = [p for p in request.path.split("/") if p]
        if parts == ["downloads"]:
            if request.method == "GET":
                wanted = request.query.get("infohash")
                downloads = [d for d in self.downloads if not wanted or d["infohash"] == wanted]
                return web.json_response({"downloads": downloads, "checkpoints": {"total": 0, "loaded": 0, "all_loaded": True}})
            if request.method == "PUT":
                infohash = self.next_infohash
                self.downloads.append(make_download(infohash, name=body["uri"].rsplit("=", 1)[-1]))
                return web.json_response({"started": True, "infohash": infohash})

        if len(parts) >= 2 and parts[0] == "downloads":
            infohash = parts[1]
            download = self._find(infohash)
            if download is None:
                return web.json_response({"error": "this download does not exist"}, status=404)
            if len(parts) == 3 and parts[2] == "files" and request.method == "GET":
                return web.json_response({"infohash": infohash, "files": self.files.get(infohash, [])})
            if request.method == "DELETE":
                self.downloads.remove(download)
                return web.json_response({"removed": True, "infohash": infohash})
            if request.method == "PATCH":
                self.states[infohash] = body["state"]
                return web.json_response({"modified": True, "infohash": infohash})

        return web.json_response({"error": "not found"}, status=404)

    def calls(self, method: str) -> List[Dict[str, Any]]:
        return [r for r in self.requests if r["method"] == method]


@pytest_asyncio.fixture
async def fake_tribler() -> AsyncGenerator[FakeTribler, None]:
    fake = FakeTribler()
    server = TestServer(fake.make_app())
    await server.start_server()
    fake.url = str(server.make_url("/")).rstrip("/")
    try:
        yield fake
    finally:
        await server.close()


@pytest.fixture
def tribler_config(fake_tribler: FakeTribler) -> TriblerConfig:
    return TriblerConfig(
        api_endpoint=fake_tribler.url,
        api_key=API_KEY,
        download_dir=DOWNLOAD_DIR,
        anon_hops=1,
        safe_seeding=True,
        timeout=2,
        default_category="tribler",
    )


@pytest_asyncio.fixture
async def tribler_client(tribler_config: TriblerConfig) -> AsyncGenerator[TriblerClient, None]:
    client = TriblerClient(tribler_config)
    try:
        yield client
    finally:
        await client.close()


@pytest_asyncio.fixture
async def session_factory(tmp_path):
    """Fresh SQLite file per test; NullPool means :memory: would not persist."""
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'shim.db'}")
    await init_db(engine)
    try:
        yield build_session_factory(engine)
    finally:
        await engine.dispose()


@pytest.fixture
def store(session_factory) -> AssociationStore:
    return AssociationStore(session_factory)


@pytest_asyncio.fixture
async def test_client(tribler_config, session_factory) -> AsyncGenerator[AsyncClient, None]:
    """
    httpx client against the FastAPI app, with services pointed at the fake
    Tribler and the per-test database. Lifespan does not run under
    ASGITransport, so state is attached here.
    """
    attach_services(fastapi_app, tribler_config, session_factory)

    async with AsyncClient(transport=ASGITransport(app=fastapi_app), base_url="http://test") as client:
        yield client

    await fastapi_app.state.tribler.close()


def _closed_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


@pytest_asyncio.fixture
async def unreachable_client() -> AsyncGenerator[TriblerClient, None]:
    """Client pointed at a port nothing listens on."""
    client = TriblerClient(TriblerConfig(
        api_endpoint=f"http://127.0.0.1:{_closed_port()}",
        api_key=API_KEY,
        download_dir=DOWNLOAD_DIR,
        timeout=2,
    ))
    try:
        yield client
    finally:
        await client.close()
