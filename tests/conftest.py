"""Shared fixtures: a WordPress client wired to an in-memory httpx transport."""

import json
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from wpgate.config import GatewayConfig, ServerConfig, WordPressConfig
from wpgate.wordpress.auth import Credential
from wpgate.wordpress.client import WordPressClient

SITE_URL = "https://blog.example.com"
API_BASE = f"{SITE_URL}/wp-json/wp/v2"


class FakeWordPress:
    """Records requests and answers them from a route table.

    Routes are keyed by ``(METHOD, path)``; the value is either an
    ``httpx.Response`` or a callable taking the request.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.routes: dict[tuple[str, str], Any] = {}

    def add(self, method: str, path: str, response: Any) -> None:
        self.routes[(method.upper(), path)] = response

    def json(
        self,
        method: str,
        path: str,
        body: Any,
        status_code: int = 200,
        headers: dict[str, str] | None = None,
    ) -> None:
        self.add(method, path, httpx.Response(status_code, json=body, headers=headers))

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(
                404, json={"code": "rest_no_route", "message": "No route was found"}
            )
        if callable(route):
            return route(request)
        return route

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> Any:
        return json.loads(self.last.content)


@pytest.fixture
def credential() -> Credential:
    return Credential(identity="editor", secret="abcd efgh ijkl mnop")


@pytest.fixture
def fake_wp() -> FakeWordPress:
    return FakeWordPress()


@pytest.fixture
def make_client(credential: Credential) -> Callable[[Callable], WordPressClient]:
    def factory(handler: Callable[[httpx.Request], httpx.Response]) -> WordPressClient:
        return WordPressClient(SITE_URL, credential, transport=httpx.MockTransport(handler))

    return factory


@pytest.fixture
def wp_client(fake_wp: FakeWordPress, make_client: Callable) -> WordPressClient:
    return make_client(fake_wp.handler)


@pytest.fixture
def gateway_config() -> GatewayConfig:
    return GatewayConfig(
        wordpress=WordPressConfig(
            site_url=SITE_URL, username="editor", app_password="abcd efgh ijkl mnop"
        ),
        server=ServerConfig(api_key="s3cret-key"),
    )
