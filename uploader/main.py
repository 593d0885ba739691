"""Command-line entry point: copy each URL into Cloudflare Stream and wait until it is ready.

Example usage
-------------
$ UPLOADER_TOKEN=... UPLOADER_ACCOUNT_ID=... uploader https://example.com/a.mp4 https://example.com/b.mp4
$ uploader --on-error continue --name "Weekly recap" https://example.com/recap.mp4
"""

from __future__ import annotations

import argparse
import enum
import sys
from collections.abc import Sequence

import structlog

from uploader.cloudflare import Client, ClientBuilder
from uploader.config import get_settings
from uploader.errors import UploadError, UploaderError
from uploader.logging_config import bind_environment, setup_logging
from uploader.schemas import Video, VideoMeta, VideoRequest
from uploader.tracing import setup_tracing
from uploader.urls import video_url

SERVICE_NAME = "uploader"
DEFAULT_VIDEO_NAME = "Test video"

logger = structlog.get_logger()


class FailurePolicy(str, enum.Enum):
    """What to do with the remaining URLs after one upload fails."""

    ABORT = "abort"
    CONTINUE = "continue"

    def __str__(self) -> str:
        return self.value


def positive_int(value: str) -> int:
    """argparse type: an integer >= 1."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {value!r}") from None
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1: {value!r}")
    return number


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        SERVICE_NAME, description="Copy videos into Cloudflare Stream and wait until they are ready."
    )
    parser.add_argument("urls", nargs="+", type=video_url, metavar="URL", help="video source URL")
    parser.add_argument("--name", default=DEFAULT_VIDEO_NAME, help="display name for every video")
    parser.add_argument(
        "--on-error",
        type=FailurePolicy,
        choices=list(FailurePolicy),
        default=FailurePolicy.ABORT,
        help="stop at the first failed upload (abort) or keep going (continue)",
    )
    parser.add_argument(
        "--max-polls",
        type=positive_int,
        default=None,
        help="give up on a video after this many readiness checks (default: never)",
    )
    parser.add_argument(
        "--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"]
    )
    parser.add_argument("--json-logs", action="store_true", help="emit JSON log lines")
    return parser


def upload_one(client: Client, url: str, name: str, max_polls: int | None = None) -> Video:
    """Upload a single URL, wrapping any failure in UploadError."""
    request = VideoRequest(url=url, meta=VideoMeta(name=name))
    try:
        return client.upload_video(request, max_polls=max_polls)
    except UploaderError as e:
        raise UploadError("Failed to upload video", url=url) from e


def upload_all(
    client: Client,
    urls: Sequence[str],
    name: str = DEFAULT_VIDEO_NAME,
    policy: FailurePolicy = FailurePolicy.ABORT,
    max_polls: int | None = None,
) -> list[UploadError]:
    """Upload every URL in order. Returns the failures; raises the first one under ABORT."""
    failures: list[UploadError] = []
    for url in urls:
        try:
            video = upload_one(client, url, name, max_polls=max_polls)
        except UploadError as e:
            if policy is FailurePolicy.ABORT:
                raise
            logger.error("upload_all.video_failed", video_url=url, exc_info=e)
            failures.append(e)
            continue
        logger.info("upload_all.video_uploaded", uid=video.uid, preview=video.preview)
    return failures


def run(args: argparse.Namespace) -> int:
    settings = get_settings()
    bind_environment(settings.ENV)
    provider = setup_tracing(
        service_name=SERVICE_NAME,
        environment=settings.ENV,
        endpoint=settings.OTEL_EXPORTER_OTLP_ENDPOINT,
    )

    builder = ClientBuilder().token(settings.TOKEN).account_id(settings.ACCOUNT_ID)
    try:
        with builder.build() as client:
            failures = upload_all(
                client,
                args.urls,
                name=args.name,
                policy=args.on_error,
                max_polls=args.max_polls,
            )
    finally:
        provider.shutdown()

    if failures:
        logger.error(
            "uploader.failed",
            failed=len(failures),
            total=len(args.urls),
            failed_urls=[f.url for f in failures],
        )
        return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(sys.argv[1:] if argv is None else argv)
    setup_logging(service_name=SERVICE_NAME, level=args.log_level, json_logs=args.json_logs)

    logger.info("uploader.start", videos=len(args.urls), policy=args.on_error.value)
    try:
        status = run(args)
    except UploaderError as e:
        logger.error("uploader.failed", error=str(e), exc_info=e)
        return 1
    if status == 0:
        logger.info("uploader.stopped")
    return status


if __name__ == "__main__":
    sys.exit(main())
