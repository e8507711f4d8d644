#!/usr/bin/env python3
"""Restore pipeline: archive repository -> local mirror -> GitHub."""

from __future__ import annotations

from errors import InvalidRemoteFormat, ProvisionErrorKind, ProvisionFailed
from logging_utils import Logger
from remote_config import configured_url, ensure_remote
from sync_orchestrator import SyncOrchestrator
from utils import RepositoryRef, resolve_remote, short_name

SOURCE_REMOTE = "github"


class RestoreOrchestrator(SyncOrchestrator):
    """Pushes archived mirrors back to their original GitHub location.

    A URL that cannot be parsed aborts the whole run rather than being
    skipped, unlike the mirror pipeline.
    """

    action = "restore"
    fatal_errors = (InvalidRemoteFormat,)

    def describe(self, url: str) -> str:
        return f"archive/{short_name(url)} -> {url}"

    def process_repository(self, url: str) -> None:
        ref = resolve_remote(url, self.github.git_hostname())
        # archive repos are named by the mirror pipeline's short name
        archive_name = short_name(url)
        dest = self.store.path_for(archive_name)

        push_url = self.ensure_source(ref)

        metadata = self.archive.get_repository(archive_name)
        clone_url = metadata.clone_url(self.cfg.git.push_method)

        self.warn_on_foreign_origin(dest, clone_url)
        self.store.clone_or_update(clone_url, dest)
        ensure_remote(dest, SOURCE_REMOTE, push_url)
        self.runner.push_mirror(dest, SOURCE_REMOTE, self.github_credentials(push_url))
        Logger.success(f"restored {ref.owner}/{ref.name}")

    def ensure_source(self, ref: RepositoryRef) -> str:
        """Push URL of the GitHub repository, creating it when missing."""
        try:
            return self.github.get_repository(ref.owner, ref.name)
        except ProvisionFailed as e:
            if e.kind is not ProvisionErrorKind.NOT_FOUND:
                raise
        Logger.info(f"source repo {ref.owner}/{ref.name} not found, creating")
        return self.github.create_repository(
            ref.owner, ref.name, f"Restored from archive {ref.name}"
        )

    @staticmethod
    def warn_on_foreign_origin(dest: str, clone_url: str) -> bool:
        """Warn when an existing mirror at ``dest`` does not track the archive.

        A mirror left by an earlier migration run has GitHub as ``origin``;
        updating it fetches from GitHub instead of the archive.
        """
        origin = configured_url(dest, "origin")
        if origin is None or origin == clone_url:
            return False
        Logger.warn(
            f"mirror at {dest} has origin {origin}, not the archive {clone_url}; "
            "use a separate --workdir for restore runs"
        )
        return True
