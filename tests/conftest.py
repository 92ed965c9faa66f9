from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer


@dataclass
class RecordedRequest:
    endpoint: str
    headers: Dict[str, str]
    form: Any


@dataclass
class FakeDeepLServer:
    """Local stand-in for the DeepL v2 API that records every request."""

    url: str = ""
    requests: List[RecordedRequest] = field(default_factory=list)
    responses: Dict[str, Tuple[int, Optional[Any], Optional[Any]]] = field(default_factory=dict)

    def respond(
        self,
        endpoint: str,
        status: int = 200,
        json_body: Any = None,
        text: Optional[str] = None,
        body: Optional[bytes] = None,
    ) -> None:
        self.responses[endpoint] = (status, json_body, body if body is not None else text)

    async def handle(self, request: web.Request) -> web.Response:
        endpoint = "/" + request.match_info["endpoint"]
        form = await request.post()
        self.requests.append(RecordedRequest(endpoint, dict(request.headers), form))

        status, json_body, raw = self.responses.get(endpoint, (404, {"message": "Not found"}, None))
        if isinstance(raw, bytes):
            return web.Response(status=status, body=raw, content_type="application/json")
        if raw is not None:
            return web.Response(status=status, text=raw, content_type="text/plain")
        return web.json_response(json_body, status=status)

    def app(self) -> web.Application:
        application = web.Application()
        application.router.add_post("/v2/{endpoint}", self.handle)
        return application


@pytest_asyncio.fixture
async def deepl_server():
    fake = FakeDeepLServer()
    server = TestServer(fake.app())
    await server.start_server()
    fake.url = str(server.make_url("/v2"))
    yield fake
    await server.close()
