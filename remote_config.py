#!/usr/bin/env python3
"""Idempotent remote configuration for bare mirrors.

The remote stanza is written straight into the mirror's ``config`` with
branch and tag refspecs only, so a mirror push does not carry refs the
destination may refuse (pull request refs, notes).
"""

from __future__ import annotations

import os
from typing import Optional

from errors import ConfigWriteFailed
from logging_utils import Logger

MIRROR_REFSPECS = (
    "+refs/heads/*:refs/heads/*",
    "+refs/tags/*:refs/tags/*",
)

REMOTE_TEMPLATE = "[remote \"{name}\"]\n\turl = {url}\n" + "".join(
    f"\tfetch = {spec}\n" for spec in MIRROR_REFSPECS
)


def remote_header(remote_name: str) -> str:
    return f"[remote \"{remote_name}\"]"


def has_remote(config_text: str, remote_name: str) -> bool:
    """Line scan for a literal ``[remote "<name>"]`` header."""
    header = remote_header(remote_name)
    return any(header in line for line in config_text.splitlines())


def configured_url(dest: str, remote_name: str) -> Optional[str]:
    """URL configured for ``remote_name`` in ``dest/config``, if readable."""
    try:
        with open(os.path.join(dest, "config"), "r", encoding="utf-8") as fh:
            lines = fh.read().splitlines()
    except (OSError, UnicodeDecodeError):
        return None
    header = remote_header(remote_name)
    in_section = False
    for line in lines:
        stripped = line.strip()
        if stripped.startswith("["):
            in_section = header in stripped
            continue
        key, sep, value = stripped.partition("=")
        if in_section and sep and key.strip() == "url":
            return value.strip()
    return None


def ensure_remote(dest: str, remote_name: str, remote_url: str) -> bool:
    """Append a remote stanza to ``dest/config`` unless one already exists.

    Returns True when the stanza was added. An existing remote is left as is,
    even if its URL differs. Not safe for concurrent callers on one ``dest``.
    """
    path = os.path.join(dest, "config")
    try:
        with open(path, "r", encoding="utf-8") as fh:
            existing = fh.read()
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigWriteFailed(path, str(e)) from e

    if has_remote(existing, remote_name):
        Logger.info(f"remote '{remote_name}' already configured")
        return False

    stanza = REMOTE_TEMPLATE.format(name=remote_name, url=remote_url)
    if existing and not existing.endswith("\n"):
        stanza = "\n" + stanza

    try:
        with open(path, "a", encoding="utf-8") as fh:
            fh.write(stanza)
    except OSError as e:
        raise ConfigWriteFailed(path, str(e)) from e

    Logger.info(f"configured remote '{remote_name}' -> {remote_url}")
    return True
