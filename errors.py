#!/usr/bin/env python3
"""Exception hierarchy for gitmirror.

Everything raised by the mirror pipeline derives from GitMirrorError so the
orchestrators can fold per-repository failures into the run summary.
"""

from __future__ import annotations

from enum import Enum
from typing import List, Optional


class GitMirrorError(Exception):
    """Base exception for mirroring and restore operations."""


class InvalidRemoteFormat(GitMirrorError):
    """Source URL does not match the expected clone URL pattern."""

    def __init__(self, url: str) -> None:
        super().__init__(f"failed to parse remote {url}")
        self.url = url


class GitCommandFailed(GitMirrorError):
    """A git invocation exited non-zero (or timed out)."""

    def __init__(self, command: List[str], output: str) -> None:
        self.command = command
        self.output = output
        super().__init__(output.strip() or f"'{' '.join(command)}' failed")


class CloneFailed(GitCommandFailed):
    pass


class UpdateFailed(GitCommandFailed):
    pass


class PushFailed(GitCommandFailed):
    pass


class ConfigWriteFailed(GitMirrorError):
    """Mirror configuration could not be read or appended."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"cannot update git config {path}: {reason}")
        self.path = path


class ProvisionErrorKind(Enum):
    """Classification of hosting-service provisioning failures."""
    ALREADY_EXISTS = "already_exists"
    NOT_FOUND = "not_found"
    OTHER = "other"


class ProvisionFailed(GitMirrorError):
    """A hosting-service collaborator could not create or look up a repo."""

    def __init__(
        self, kind: ProvisionErrorKind, message: str, name: Optional[str] = None
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.name = name


class DeleteFailed(GitMirrorError):
    """Deleting the source repository after a mirror failed."""
