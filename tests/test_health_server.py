from types import SimpleNamespace

import pytest
from aiohttp.test_utils import TestClient, TestServer

from conftest import make_message
from prefixbot.core.health_server import HealthCheckServer


class FakeBot:
    def __init__(self, ready=True):
        self.ready = ready
        self.user = SimpleNamespace(id=42)
        self.guilds = [object(), object()]

    def is_ready(self) -> bool:
        return self.ready


@pytest.fixture
async def client_for():
    clients = []

    async def make(server: HealthCheckServer) -> TestClient:
        client = TestClient(TestServer(server.app))
        await client.start_server()
        clients.append(client)
        return client

    yield make
    for client in clients:
        await client.close()


async def test_ping(client_for):
    client = await client_for(HealthCheckServer())
    resp = await client.get("/ping")
    assert resp.status == 200
    assert await resp.text() == "pong"


async def test_health_while_starting(client_for):
    client = await client_for(HealthCheckServer(bot=FakeBot(ready=False)))
    resp = await client.get("/health")
    assert resp.status == 200
    assert await resp.json() == {"status": "starting", "ready": False}


async def test_status_reports_dispatcher(client_for, loaded_dispatcher):
    await loaded_dispatcher.handle_message(make_message("!ping"))

    client = await client_for(HealthCheckServer(bot=FakeBot(), dispatcher=loaded_dispatcher))
    body = await (await client.get("/status")).json()
    assert body["bot_id"] == "42"
    assert body["guilds"] == 2
    assert body["commands"] == len(loaded_dispatcher.registry)
    assert body["cooldown_entries"] == 1


async def test_root(client_for):
    client = await client_for(HealthCheckServer())
    body = await (await client.get("/")).json()
    assert body == {"service": "prefixbot", "version": "1.0.0", "status": "running"}
