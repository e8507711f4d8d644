#!/usr/bin/env python3
"""AWS CodeCommit wrapper for archive repositories."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Any, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from config import ArchiveConfig, CloneMethod
from errors import ProvisionErrorKind, ProvisionFailed
from logging_utils import Logger

# Exit codes
EXIT_AUTH_ERROR = 40
EXIT_ARCHIVE_ERROR = 32

# CodeCommit error codes that map onto provisioning outcomes
ERROR_KINDS = {
    "RepositoryNameExistsException": ProvisionErrorKind.ALREADY_EXISTS,
    "RepositoryDoesNotExistException": ProvisionErrorKind.NOT_FOUND,
}


@dataclass(frozen=True)
class ArchiveMetadata:
    """Subset of CodeCommit's RepositoryMetadata used by the pipelines."""
    name: str
    clone_url_ssh: str
    clone_url_http: str
    arn: str = ""

    @classmethod
    def from_response(cls, metadata: dict) -> "ArchiveMetadata":
        return cls(
            name=metadata.get("repositoryName", ""),
            clone_url_ssh=metadata.get("cloneUrlSsh", ""),
            clone_url_http=metadata.get("cloneUrlHttp", ""),
            arn=metadata.get("Arn", ""),
        )

    def clone_url(self, method: CloneMethod) -> str:
        if method == CloneMethod.SSH:
            return self.clone_url_ssh
        return self.clone_url_http


class CodeCommitArchive:
    """Archive host collaborator backed by boto3."""

    def __init__(self, config: ArchiveConfig) -> None:
        self.config = config
        self.client: Optional[Any] = None

    def connect(self) -> None:
        Logger.info(f"init codecommit client: {self.config.region}")
        try:
            session = boto3.session.Session(region_name=self.config.region)
            identity = session.client("sts").get_caller_identity()
            self.client = session.client("codecommit")
            Logger.debug(f"aws identity: {identity.get('Arn', '')}")
        except ClientError as e:
            Logger.error(f"authentication failed (aws): {e}")
            sys.exit(EXIT_AUTH_ERROR)
        except BotoCoreError as e:
            Logger.error(f"failed to initialize aws session: {e}")
            sys.exit(EXIT_ARCHIVE_ERROR)

    def _require_client(self) -> Any:
        if self.client is None:
            Logger.error("codecommit client not initialized")
            sys.exit(EXIT_ARCHIVE_ERROR)
        return self.client

    @staticmethod
    def _provision_error(name: str, action: str, error: Exception) -> ProvisionFailed:
        kind = ProvisionErrorKind.OTHER
        if isinstance(error, ClientError):
            code = error.response.get("Error", {}).get("Code", "")
            kind = ERROR_KINDS.get(code, ProvisionErrorKind.OTHER)
        return ProvisionFailed(kind, f"failed to {action} '{name}': {error}", name=name)

    def create_repository(self, name: str, description: str) -> ArchiveMetadata:
        """Create ``name``. Raises ProvisionFailed(ALREADY_EXISTS) on collision."""
        client = self._require_client()
        try:
            response = client.create_repository(
                repositoryName=name, repositoryDescription=description
            )
        except (ClientError, BotoCoreError) as e:
            raise self._provision_error(name, "create archive repo", e) from e
        Logger.info(f"created archive repo: {name}")
        return ArchiveMetadata.from_response(response["repositoryMetadata"])

    def get_repository(self, name: str) -> ArchiveMetadata:
        client = self._require_client()
        try:
            response = client.get_repository(repositoryName=name)
        except (ClientError, BotoCoreError) as e:
            raise self._provision_error(name, "get archive repo", e) from e
        return ArchiveMetadata.from_response(response["repositoryMetadata"])
