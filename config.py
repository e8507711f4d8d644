#!/usr/bin/env python3
"""Configuration dataclasses for gitmirror."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class CloneMethod(Enum):
    """Enumeration for git clone/push methods."""
    HTTPS = "https"
    SSH = "ssh"


class Command(Enum):
    """Enumeration for the two pipeline directions."""
    MIRROR = "mirror"
    RESTORE = "restore"


@dataclass
class GitHubConfig:
    """GitHub (source host) configuration."""
    api_url: str
    token: str
    org: Optional[str] = None


@dataclass
class ArchiveConfig:
    """CodeCommit (archive host) configuration."""
    region: str


@dataclass
class GitOperationConfig:
    """Git operation configuration."""
    workdir: str
    push_method: CloneMethod = CloneMethod.SSH
    timeout_s: Optional[float] = None


@dataclass
class RunConfig:
    """Per-invocation behavior."""
    command: Command
    origin: Optional[str] = None
    destroy: bool = False
    dry_run: bool = False


@dataclass
class Config:
    """Main configuration for a mirror or restore run."""
    github: GitHubConfig
    archive: ArchiveConfig
    git: GitOperationConfig
    run: RunConfig
