#!/usr/bin/env python3
"""Sources of the repository URL list fed into a run."""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional, TextIO

if TYPE_CHECKING:
    from github_source import GitHubSource

from logging_utils import Logger


def read_repo_list(stream: TextIO) -> List[str]:
    """Read one URL per line; blank lines and ``#`` comments are ignored."""
    repos: List[str] = []
    for line in stream:
        url = line.strip()
        if not url or url.startswith("#"):
            continue
        repos.append(url)
    return repos


def collect_repositories(
    origin: Optional[str],
    org: Optional[str],
    github: Optional["GitHubSource"],
    stream: TextIO,
) -> List[str]:
    """Pick the input: single origin, then org listing, then the stream."""
    if origin:
        return [origin]
    if org:
        if github is None:
            raise ValueError("organization listing requires a GitHub session")
        return github.list_private_repos(org)
    Logger.info("reading repository list from stdin")
    return read_repo_list(stream)
