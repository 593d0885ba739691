"""Shared fixtures: a Cloudflare client wired to an httpx.MockTransport."""

from collections.abc import Callable, Iterator

import httpx
import pytest

from uploader.cloudflare import Client, ClientBuilder

TOKEN = "test-token"
ACCOUNT_ID = "acct-123"


def envelope(result: object = None, success: bool = True, errors: list | None = None) -> dict:
    """Cloudflare-shaped response body."""
    return {"result": result, "success": success, "errors": errors or [], "messages": []}


def video_payload(uid: str = "vid-1", ready: bool = False) -> dict:
    return {
        "uid": uid,
        "preview": f"https://customer-x.cloudflarestream.com/{uid}/watch",
        "readyToStream": ready,
        "status": {"state": "ready" if ready else "downloading"},
    }


@pytest.fixture
def make_client() -> Iterator[Callable]:
    """Return a factory building a Client whose requests go to handler and are recorded."""
    clients: list[httpx.Client] = []

    def factory(handler: Callable[[httpx.Request], httpx.Response]) -> tuple[Client, list[httpx.Request]]:
        seen: list[httpx.Request] = []

        def recording_handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return handler(request)

        http_client = httpx.Client(transport=httpx.MockTransport(recording_handler))
        clients.append(http_client)
        client = ClientBuilder().token(TOKEN).account_id(ACCOUNT_ID).http_client(http_client).build()
        return client, seen

    yield factory
    for http_client in clients:
        http_client.close()
