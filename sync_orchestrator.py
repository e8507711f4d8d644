#!/usr/bin/env python3
"""Shared batch loop for the mirror and restore pipelines."""

from __future__ import annotations

import sys
from typing import List, Optional, TextIO, Tuple, Type

from codecommit_archive import CodeCommitArchive
from config import Config
from errors import GitMirrorError
from git_runner import GitCredentials, GitRunner
from github_source import GitHubSource
from logging_utils import Logger
from mirror_store import LocalMirrorStore
from repo_input import collect_repositories
from run_stats import RunStats

# Exit codes
EXIT_SUCCESS = 0
EXIT_EXECUTION_ERROR = 1


class SyncOrchestrator:
    """Runs one pipeline per repository URL, strictly in order.

    Subclasses implement ``process_repository`` and ``describe``. Errors listed
    in ``fatal_errors`` abort the batch; any other GitMirrorError marks the
    repository as skipped and the loop moves on.
    """

    action = "sync"
    fatal_errors: Tuple[Type[BaseException], ...] = ()

    def __init__(self, cfg: Config, stream: Optional[TextIO] = None) -> None:
        self.cfg = cfg
        self.stream = stream if stream is not None else sys.stdin
        self.github = GitHubSource(cfg.github, cfg.git.push_method)
        self.archive = CodeCommitArchive(cfg.archive)
        self.runner = GitRunner(timeout_s=cfg.git.timeout_s)
        self.store = LocalMirrorStore(cfg.git.workdir, self.runner)

    def run(self) -> int:
        try:
            self.github.connect()
            self.archive.connect()

            repos = collect_repositories(
                self.cfg.run.origin, self.cfg.github.org, self.github, self.stream
            )

            if self.cfg.run.dry_run:
                total = len(repos)
                for idx, url in enumerate(repos, start=1):
                    Logger.info(f"[{idx}/{total}] would {self.action}: {self.describe(url)}")
                Logger.info("dry-run completed")
                return EXIT_SUCCESS

            try:
                workdir = self.store.ensure_workdir()
            except OSError as e:
                Logger.error(f"cannot create working directory: {e}")
                return EXIT_EXECUTION_ERROR
            Logger.debug(f"working directory: {workdir}")

            stats = RunStats()
            try:
                self.process_batch(repos, stats)
            finally:
                stats.report()

            Logger.info("mission accomplished")
            return EXIT_SUCCESS
        except SystemExit as e:
            return int(e.code) if isinstance(e.code, int) else EXIT_EXECUTION_ERROR
        except GitMirrorError as e:
            Logger.error(f"{self.action} aborted: {e}")
            return EXIT_EXECUTION_ERROR
        except Exception as e:
            Logger.error(f"unexpected error: {e}")
            return EXIT_EXECUTION_ERROR

    def process_batch(self, repos: List[str], stats: RunStats) -> RunStats:
        total = len(repos)
        for idx, url in enumerate(repos, start=1):
            Logger.info(f"[{idx}/{total}] {self.action}: {url}")
            try:
                self.process_repository(url)
            except self.fatal_errors:
                raise
            except GitMirrorError as e:
                Logger.error(f"{self.action} failed for {url}: {e}")
                stats.record_skip(url)
                continue
            stats.record_success()
        return stats

    def process_repository(self, url: str) -> None:
        raise NotImplementedError

    def describe(self, url: str) -> str:
        return url

    def github_credentials(self, url: str) -> Optional[GitCredentials]:
        """Token credentials for HTTPS URLs; SSH relies on the user's keys."""
        if url.startswith("https://") and self.cfg.github.token:
            return self.github.credentials()
        return None
