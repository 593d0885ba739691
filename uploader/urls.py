"""Video source URL validation."""

import argparse

import httpx

_SCHEMES = {"http", "https"}


def is_video_url(url: str) -> bool:
    """Return True if url is an absolute http(s) URL with a host, else False.

    Anything beyond scheme and host (reachability, file type) is left to Cloudflare.
    """
    if not url or not url.strip():
        return False
    try:
        parsed = httpx.URL(url.strip())
    except httpx.InvalidURL:
        return False
    return parsed.scheme in _SCHEMES and bool(parsed.host)


def video_url(value: str) -> str:
    """argparse type: return the stripped URL or raise ArgumentTypeError."""
    if not is_video_url(value):
        raise argparse.ArgumentTypeError(f"not an http(s) video URL: {value!r}")
    return value.strip()
