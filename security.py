#!/usr/bin/env python3
"""Input validation and log redaction for gitmirror."""

import os
import re
from typing import List, Optional


class SecurityValidator:
    """Security validation utilities for input sanitization and validation."""

    MAX_URL_LENGTH = 2048
    MAX_ORG_LENGTH = 100
    MAX_PATH_LENGTH = 500

    SAFE_ORG_PATTERN = re.compile(r"^[A-Za-z0-9._-]+$")

    # Credentials that may show up in git output or exception text
    REDACTIONS = [
        (r"https://[^:/@\s]+:[^@\s]+@", "https://[REDACTED]@"),
        (r"token[=:\s]+[^\s]+", "token=[REDACTED]"),
        (r"password[=:\s]+[^\s]+", "password=[REDACTED]"),
        (r"gh[pousr]_[A-Za-z0-9_]+", "[GITHUB_TOKEN_REDACTED]"),
        (r"github_pat_[A-Za-z0-9_]+", "[GITHUB_TOKEN_REDACTED]"),
        (r"(?:AKIA|ASIA)[A-Z0-9]{16}", "[AWS_KEY_REDACTED]"),
    ]

    @classmethod
    def validate_url(cls, url: str, allowed_schemes: Optional[List[str]] = None) -> str:
        """Validate a git remote URL (https, http or scp-like ssh)."""
        if not url or not isinstance(url, str):
            raise ValueError("URL must be a non-empty string")

        if len(url) > cls.MAX_URL_LENGTH:
            raise ValueError(f"URL exceeds maximum length of {cls.MAX_URL_LENGTH}")

        if "\x00" in url or any(ord(c) < 32 for c in url):
            raise ValueError("URL contains null bytes or control characters")

        if url.startswith(("http://", "https://", "ssh://")):
            scheme = url.split("://")[0].lower()
        elif re.match(r"^[\w.-]+@[\w.-]+:", url):
            scheme = "ssh"
        else:
            raise ValueError("URL must use http, https, or SSH (user@host:path) form")

        if allowed_schemes and scheme not in allowed_schemes:
            raise ValueError(
                f"URL scheme '{scheme}' not in allowed schemes: {allowed_schemes}"
            )
        return url

    @classmethod
    def validate_org(cls, org: str) -> str:
        """Validate a GitHub organization name."""
        if not org or not isinstance(org, str):
            raise ValueError("Organization must be a non-empty string")

        if len(org) > cls.MAX_ORG_LENGTH:
            raise ValueError(
                f"Organization exceeds maximum length of {cls.MAX_ORG_LENGTH}"
            )

        if not cls.SAFE_ORG_PATTERN.match(org):
            raise ValueError("Organization contains invalid characters")

        return org

    @classmethod
    def validate_file_path(cls, path: str) -> str:
        """Validate the working directory path."""
        if not path or not isinstance(path, str):
            raise ValueError("File path must be a non-empty string")

        if len(path) > cls.MAX_PATH_LENGTH:
            raise ValueError(
                f"File path exceeds maximum length of {cls.MAX_PATH_LENGTH}"
            )

        if "\x00" in path:
            raise ValueError("File path contains null bytes")

        return os.path.normpath(path)

    @classmethod
    def sanitize_for_logging(cls, message: str) -> str:
        """Sanitize message for safe logging by removing potential credentials."""
        if not message:
            return message

        sanitized = str(message)
        for pattern, replacement in cls.REDACTIONS:
            sanitized = re.sub(pattern, replacement, sanitized, flags=re.IGNORECASE)

        return sanitized
