"""Fetching a resource into memory while measuring download speed."""

from __future__ import annotations

import time
from dataclasses import dataclass
from enum import Enum

import httpx

USER_AGENT = "curl/7.81.0"
MAX_REDIRECTS = 50


class HttpVersion(Enum):
    """HTTP protocol version to request."""

    HTTP_1_1 = "1.1"
    HTTP_2_0 = "2.0"


class HttpFetchError(RuntimeError):
    """Raised when a resource could not be transferred."""


@dataclass(frozen=True)
class Download:
    """A fetched body with its status and average speed in bytes per second."""

    data: bytes
    speed: float
    status_code: int


def get_to_buffer(
    url: str, version: HttpVersion | str = HttpVersion.HTTP_2_0
) -> Download:
    """Fetch ``url`` into memory, following redirects.

    HTTP error statuses are not failures: their body is returned with the
    status code.  Certificates are not verified.
    """
    version = HttpVersion(version)
    try:
        with httpx.Client(
            http1=True,
            http2=version is HttpVersion.HTTP_2_0,
            verify=False,
            follow_redirects=True,
            max_redirects=MAX_REDIRECTS,
            headers={"User-Agent": USER_AGENT},
            timeout=None,
        ) as client:
            start = time.perf_counter()
            response = client.get(url)
            data = response.content
            elapsed = time.perf_counter() - start
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        raise HttpFetchError(f"failed to fetch {url}: {exc}") from exc
    speed = len(data) / elapsed if elapsed > 0 else 0.0
    return Download(data=data, speed=speed, status_code=response.status_code)