"""Test fixtures for harbor-auth-client."""

import asyncio
import json
import socket
from collections.abc import AsyncIterator, Iterator
from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Any

import pytest
import uvicorn
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import Response
from starlette.routing import Route

from harbor_auth.client import HarborAuthClient

# =============================================================================
# FakeResponse - HTTP-like response configuration
# =============================================================================


@dataclass
class FakeResponse:
    """HTTP-like response for fake server.

    Attributes:
        http_status: HTTP status code
        body: Response body (dict, list or raw str), or None for an empty body
        delay: Seconds to wait before answering
    """

    http_status: HTTPStatus = HTTPStatus.OK
    body: dict | list | str | None = None
    delay: float = 0.0


# Keyed by "METHOD /path", e.g. "POST /v1/auth/gettoken"
FakeResponses = dict[str, FakeResponse]


@dataclass
class ReceivedRequest:
    method: str
    path: str
    headers: dict[str, str]
    body: Any = field(default=None)


def _serialize_body(body: Any) -> str:
    if body is None:
        return ""
    if isinstance(body, (list, dict)):
        return json.dumps(body)
    return str(body)


# =============================================================================
# Fixtures - Real HTTP fake server
# =============================================================================


@pytest.fixture
def fake_responses() -> FakeResponses:
    """Default empty fake responses, every request gets a 404."""
    return {}


@pytest.fixture
def received_requests() -> list[ReceivedRequest]:
    """Requests that reached the fake server, in arrival order."""
    return []


@pytest.fixture
def fake_server_socket() -> Iterator[socket.socket]:
    """Create a bound socket for the fake server."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    sock.bind(("127.0.0.1", 0))
    yield sock
    sock.close()


@pytest.fixture
def fake_server_url(fake_server_socket: socket.socket) -> str:
    """URL for the fake server."""
    _, port = fake_server_socket.getsockname()
    return f"http://127.0.0.1:{port}"


@pytest.fixture
def refused_url() -> Iterator[str]:
    """URL of a bound port nobody listens on, so connections are refused."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    _, port = sock.getsockname()
    yield f"http://127.0.0.1:{port}"
    sock.close()


@pytest.fixture
async def http_fake_server(
    fake_responses: FakeResponses,
    received_requests: list[ReceivedRequest],
    fake_server_socket: socket.socket,
) -> AsyncIterator[None]:
    """Real HTTP server returning configured fake responses."""

    async def handle_request(request: Request) -> Response:
        raw = await request.body()
        try:
            body = json.loads(raw) if raw else None
        except ValueError:
            body = raw.decode(errors="replace")

        received_requests.append(
            ReceivedRequest(
                method=request.method,
                path=request.url.path,
                headers={k.lower(): v for k, v in request.headers.items()},
                body=body,
            )
        )

        fake_response = fake_responses.get(f"{request.method} {request.url.path}")
        if fake_response is None:
            return Response(
                content=json.dumps({"error": f"No fake response for {request.method} {request.url.path}"}),
                status_code=404,
                media_type="application/json",
            )

        if fake_response.delay:
            await asyncio.sleep(fake_response.delay)

        return Response(
            content=_serialize_body(fake_response.body),
            status_code=fake_response.http_status.value,
            media_type="application/json",
        )

    app = Starlette(
        routes=[
            Route("/{path:path}", endpoint=handle_request, methods=["GET", "POST"]),
        ],
    )

    config = uvicorn.Config(app, log_level="error")
    server = uvicorn.Server(config)
    server_task = asyncio.create_task(server.serve(sockets=[fake_server_socket]))
    while not server.started:
        if server_task.done():
            server_task.result()
            raise RuntimeError("Fake server exited before startup")
        await asyncio.sleep(0.01)

    yield

    server.should_exit = True
    await server_task


@pytest.fixture
async def auth_client(http_fake_server: None, fake_server_url: str) -> HarborAuthClient:
    """Real HarborAuthClient pointing to the fake HTTP server."""
    return HarborAuthClient(fake_server_url)
