#!/usr/bin/env python3
"""Local store of bare mirror clones, one directory per repository."""

from __future__ import annotations

import os
from enum import Enum
from typing import Optional

from git_runner import GitCredentials, GitRunner
from logging_utils import Logger


class MirrorState(Enum):
    """Lifecycle of a local mirror.

    ABSENT -> CLONED via clone, CLONED/UP_TO_DATE -> UP_TO_DATE via update.
    Nothing here ever removes a mirror directory.
    """
    ABSENT = "absent"
    CLONED = "cloned"
    UP_TO_DATE = "up_to_date"


class LocalMirrorStore:
    """Working directory of bare mirrors rooted at ``workdir``."""

    def __init__(self, workdir: str, runner: Optional[GitRunner] = None) -> None:
        self.workdir = os.path.abspath(workdir)
        self.runner = runner or GitRunner()

    def ensure_workdir(self) -> str:
        """Create the working root if needed. Raises OSError on failure."""
        os.makedirs(self.workdir, mode=0o755, exist_ok=True)
        return self.workdir

    def path_for(self, name: str) -> str:
        return os.path.join(self.workdir, name)

    @staticmethod
    def exists(dest: str) -> bool:
        return os.path.exists(dest)

    def clone_or_update(
        self,
        url: str,
        dest: str,
        credentials: Optional[GitCredentials] = None,
    ) -> MirrorState:
        """Mirror-clone ``url`` into ``dest``, or fetch into an existing copy.

        An existing ``dest`` is not an error: the ``origin`` remote is updated
        with pruning instead of cloning again. Raises CloneFailed or
        UpdateFailed with git's output.
        """
        if not self.exists(dest):
            self.runner.clone_mirror(url, dest, credentials)
            return MirrorState.CLONED

        Logger.info(f"working copy at {dest} exists, updating")
        self.runner.remote_update(dest, "origin", credentials)
        return MirrorState.UP_TO_DATE
