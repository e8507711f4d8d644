#!/usr/bin/env python3
"""Mirror pipeline: source repository -> local mirror -> archive repository."""

from __future__ import annotations

from codecommit_archive import ArchiveMetadata
from errors import ProvisionErrorKind, ProvisionFailed
from logging_utils import Logger
from remote_config import ensure_remote
from sync_orchestrator import SyncOrchestrator
from utils import resolve_remote, short_name

ARCHIVE_REMOTE = "archive"


class MirrorOrchestrator(SyncOrchestrator):
    action = "mirror"

    def describe(self, url: str) -> str:
        return f"{url} -> {ARCHIVE_REMOTE}/{short_name(url)}"

    def process_repository(self, url: str) -> None:
        name = short_name(url)
        dest = self.store.path_for(name)

        self.store.clone_or_update(url, dest, self.github_credentials(url))

        metadata = self.ensure_archive(name, url)
        push_url = metadata.clone_url(self.cfg.git.push_method)
        Logger.debug(f"archive repo '{name}' clone url {push_url}")

        ensure_remote(dest, ARCHIVE_REMOTE, push_url)
        self.runner.push_mirror(dest, ARCHIVE_REMOTE)
        Logger.success(f"archived {url}")

        if self.cfg.run.destroy:
            self.destroy_source(url)

    def ensure_archive(self, name: str, url: str) -> ArchiveMetadata:
        """Create the archive repository, or fetch it if the name is taken."""
        try:
            return self.archive.create_repository(name, f"Archived version of {url}")
        except ProvisionFailed as e:
            if e.kind is not ProvisionErrorKind.ALREADY_EXISTS:
                raise
        Logger.info(f"archive repo '{name}' already exists")
        return self.archive.get_repository(name)

    def destroy_source(self, url: str) -> None:
        # Any failure here counts the repository as skipped although the
        # archive copy is complete.
        ref = resolve_remote(url, self.github.git_hostname())
        Logger.warn(f"deleting source repo {ref.owner}/{ref.name}")
        self.github.delete_repository(ref.owner, ref.name)
