#!/usr/bin/env python3
"""Repository naming helpers and API rate limiting for gitmirror."""

from __future__ import annotations

import re
import threading
import time
from collections import deque
from dataclasses import dataclass
from typing import Deque, Iterable, List

from errors import InvalidRemoteFormat
from logging_utils import Logger

DEFAULT_GIT_HOST = "github.com"


class RateLimiter:
    """Sliding-window throttle for hosting-service API calls."""

    def __init__(self, max_requests_per_minute: int = 60, window_s: float = 60.0):
        self.max_requests = max_requests_per_minute
        self.window_s = window_s
        self.calls: Deque[float] = deque()
        self.lock = threading.Lock()

    def wait_if_needed(self, operation_type: str = "API") -> None:
        """Block until one more call fits in the window, then record it."""
        with self.lock:
            now = time.monotonic()
            self._expire(now)
            if len(self.calls) >= self.max_requests:
                delay = self.window_s - (now - self.calls[0])
                if delay > 0:
                    Logger.warn(
                        f"rate limit reached for {operation_type}, "
                        f"waiting {delay:.2f}s"
                    )
                    time.sleep(delay)
                now = time.monotonic()
                self._expire(now)
            self.calls.append(now)

    def _expire(self, now: float) -> None:
        while self.calls and self.calls[0] <= now - self.window_s:
            self.calls.popleft()


@dataclass(frozen=True)
class RepositoryRef:
    """Owner and name of a source repository, parsed from its clone URL."""
    source_url: str
    owner: str
    name: str


def _remote_patterns(host: str) -> List["re.Pattern[str]"]:
    host_re = re.escape(host)
    return [
        re.compile(rf"^git@{host_re}:([-\w.]+)/([-\w.]+)\.git$"),
        re.compile(rf"^https://{host_re}/([-\w.]+)/([-\w.]+?)(?:\.git)?/?$"),
    ]


def resolve_remote(url: str, host: str = DEFAULT_GIT_HOST) -> RepositoryRef:
    """Parse owner and repository name from a clone URL.

    Accepts ``git@<host>:<owner>/<name>.git`` and the HTTPS form
    ``https://<host>/<owner>/<name>[.git]`` listed for ``--push-method https``.
    No API lookup is made, which keeps batch runs free of a round-trip per
    repository.
    """
    candidate = url.strip()
    for pattern in _remote_patterns(host):
        match = pattern.match(candidate)
        if match is not None:
            return RepositoryRef(
                source_url=url, owner=match.group(1), name=match.group(2)
            )
    raise InvalidRemoteFormat(url)


def short_name(url: str) -> str:
    """Return the last path component of ``url`` without its final extension.

    Works for any URL shape, e.g. ``https://host/a/b.git`` -> ``b`` and
    ``git@host:widgets.git`` -> ``widgets``.
    """
    tail = url.strip().rstrip("/").rsplit("/", 1)[-1]
    tail = tail.rsplit(":", 1)[-1]
    dot = tail.rfind(".")
    if dot <= 0:
        return tail
    return tail[:dot]


def indent_lines(lines: Iterable[str], prefix: str = "  ") -> List[str]:
    return [f"{prefix}{line}" for line in lines]
