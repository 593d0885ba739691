"""Cloudflare Stream client: authenticated requests, envelope unwrapping, upload polling."""

from __future__ import annotations

import time
from typing import Any, TypeVar
from urllib.parse import quote

import httpx
import structlog
from opentelemetry import trace
from pydantic import BaseModel, ConfigDict, SecretStr, TypeAdapter, ValidationError

from uploader.errors import BuildError, PollTimeoutError, TransportError
from uploader.schemas import CloudflareResponse, Video, VideoRequest

logger = structlog.get_logger()
tracer = trace.get_tracer(__name__)

API_BASE = "https://api.cloudflare.com/client/v4"
POLL_INTERVAL_SECONDS = 1.0

ResultT = TypeVar("ResultT")


class Credentials(BaseModel):
    """API token and account id. Frozen; the token is masked in repr."""

    model_config = ConfigDict(frozen=True)

    token: SecretStr
    account_id: str


class ClientBuilder:
    """Collects credentials and builds a Client once both are set."""

    def __init__(self) -> None:
        self._token: str | None = None
        self._account_id: str | None = None
        self._http_client: httpx.Client | None = None

    def token(self, token: str) -> ClientBuilder:
        self._token = token
        return self

    def account_id(self, account_id: str) -> ClientBuilder:
        self._account_id = account_id
        return self

    def http_client(self, http_client: httpx.Client) -> ClientBuilder:
        """Use an externally owned httpx.Client instead of creating one."""
        self._http_client = http_client
        return self

    def build(self) -> Client:
        """Return a Client. Raises BuildError if the token or account id is missing or empty."""
        missing = [
            name
            for name, value in (("token", self._token), ("account_id", self._account_id))
            if not value or not value.strip()
        ]
        if missing:
            raise BuildError(f"Failed to build client: missing {', '.join(missing)}")
        credentials = Credentials(token=self._token, account_id=self._account_id)
        return Client(credentials, http_client=self._http_client)


class Client:
    """Authenticated client for the Cloudflare Stream API."""

    def __init__(self, credentials: Credentials, http_client: httpx.Client | None = None) -> None:
        self._credentials = credentials
        self._owns_http = http_client is None
        # No timeout: copying a large remote file can keep the request open for a long time.
        self._http = http_client if http_client is not None else httpx.Client(timeout=None)

    @property
    def account_id(self) -> str:
        return self._credentials.account_id

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> Client:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def stream_url(self, *parts: str) -> str:
        """Build an account-scoped Stream API URL, e.g. stream_url("copy")."""
        segments = ["accounts", self.account_id, "stream", *parts]
        return "/".join([API_BASE, *(quote(s, safe="") for s in segments)])

    def post(self, url: str, body: BaseModel, result_type: type[ResultT]) -> ResultT:
        """POST body as JSON and return the unwrapped envelope result."""
        return self._request("POST", url, result_type, json=body.model_dump(mode="json"))

    def get(self, url: str, result_type: type[ResultT]) -> ResultT:
        """GET url and return the unwrapped envelope result."""
        return self._request("GET", url, result_type)

    def _request(
        self, method: str, url: str, result_type: type[ResultT], json: Any = None
    ) -> ResultT:
        headers = {"Authorization": f"Bearer: {self._credentials.token.get_secret_value()}"}
        try:
            response = self._http.request(method, url, json=json, headers=headers)
            payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error("cloudflare_request.transport_failed", method=method, url=url, error=str(e))
            raise TransportError(f"{method} {url} failed: {e}") from e

        # result stays untyped until success is known; a rejection's result is never parsed
        try:
            envelope = CloudflareResponse[Any].model_validate(payload)
        except ValidationError as e:
            logger.error(
                "cloudflare_request.malformed_envelope",
                method=method,
                url=url,
                status_code=response.status_code,
            )
            raise TransportError(f"{method} {url} returned a malformed response envelope") from e

        if not envelope.success:
            logger.warning(
                "cloudflare_request.rejected",
                method=method,
                url=url,
                status_code=response.status_code,
                errors=envelope.errors,
            )
        raw_result = envelope.unwrap()

        try:
            return TypeAdapter(result_type).validate_python(raw_result)
        except ValidationError as e:
            logger.error(
                "cloudflare_request.malformed_result",
                method=method,
                url=url,
                result_type=getattr(result_type, "__name__", str(result_type)),
            )
            raise TransportError(f"{method} {url} returned a result that is not a {result_type!r}") from e

    def upload_video(self, video: VideoRequest, max_polls: int | None = None) -> Video:
        """Copy video.url into the account and block until the asset is ready to stream.

        Polls every POLL_INTERVAL_SECONDS with no limit unless max_polls is given,
        in which case PollTimeoutError is raised after that many polls.
        """
        with tracer.start_as_current_span("upload_video") as span:
            span.set_attribute("video.url", video.url)
            span.set_attribute("video.name", video.meta.name)

            logger.info("upload_video.start", video_url=video.url, name=video.meta.name)
            current = self.post(self.stream_url("copy"), video, Video)
            uid = current.uid
            span.set_attribute("video.uid", uid)
            logger.info("upload_video.copy_accepted", uid=uid, ready=current.ready_to_stream)

            polls = 0
            while not current.ready_to_stream:
                if max_polls is not None and polls >= max_polls:
                    logger.error("upload_video.poll_limit_reached", uid=uid, polls=polls)
                    raise PollTimeoutError(uid, polls)
                time.sleep(POLL_INTERVAL_SECONDS)
                current = self.get(self.stream_url(uid), Video)
                polls += 1
                logger.debug("upload_video.poll", uid=uid, poll=polls, ready=current.ready_to_stream)

            span.set_attribute("poll.count", polls)
            logger.info("upload_video.ready", uid=uid, preview=current.preview, polls=polls)
            return current
