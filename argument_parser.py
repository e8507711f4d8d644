#!/usr/bin/env python3
"""Command line argument parsing and configuration building."""

from __future__ import annotations

import argparse
import os
import sys
from typing import List, Optional

from config import (ArchiveConfig, CloneMethod, Command, Config, GitHubConfig,
                    GitOperationConfig, RunConfig)
from logging_utils import Logger
from security import SecurityValidator

# Exit codes
EXIT_AUTH_ERROR = 40
EXIT_MISSING_ARGUMENTS = 2

DEFAULT_REGION = "ap-southeast-1"
DEFAULT_WORKDIR = "work"
DEFAULT_GITHUB_API = "https://api.github.com"

TRUTHY = {"1", "true", "yes", "on"}


def env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in TRUTHY


def _create_argument_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser."""
    parser = argparse.ArgumentParser(
        prog="gitmirror",
        description="Mirror GitHub repositories to AWS CodeCommit and restore them",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s mirror < repos.txt
  %(prog)s mirror --origin git@github.com:acme/widgets.git
  %(prog)s mirror --org acme --destroy
  %(prog)s restore --workdir /srv/mirrors < repos.txt
        """,
    )
    parser.add_argument(
        "command",
        choices=[command.value for command in Command],
        help="mirror: GitHub -> CodeCommit, restore: CodeCommit -> GitHub",
    )
    return parser


def _add_source_arguments(parser: argparse.ArgumentParser) -> None:
    """Add repository input and GitHub arguments to parser."""
    parser.add_argument(
        "--origin",
        dest="origin",
        default=os.getenv("GITMIRROR_ORIGIN"),
        help="Single repository URL instead of reading stdin (or GITMIRROR_ORIGIN)",
    )
    parser.add_argument(
        "--org",
        dest="org",
        default=os.getenv("GITHUB_ORG"),
        help="Process all private repos of this GitHub organization (or GITHUB_ORG)",
    )
    parser.add_argument(
        "--token",
        dest="token",
        default=os.getenv("GITHUB_TOKEN"),
        help="GitHub access token (or GITHUB_TOKEN)",
    )
    parser.add_argument(
        "--gh-api",
        dest="gh_api_url",
        default=os.getenv("GITHUB_API_URL", DEFAULT_GITHUB_API),
        help=f"Base URL of the GitHub API (default: {DEFAULT_GITHUB_API})",
    )


def _add_behavior_arguments(parser: argparse.ArgumentParser) -> None:
    """Add archive and behavior arguments to parser."""
    parser.add_argument(
        "--aws-region",
        dest="aws_region",
        default=os.getenv("AWS_REGION", DEFAULT_REGION),
        help=f"AWS region of the archive repos (default: {DEFAULT_REGION})",
    )
    parser.add_argument(
        "--workdir",
        dest="workdir",
        default=os.getenv("GITMIRROR_WORKDIR", DEFAULT_WORKDIR),
        help=f"Directory holding local mirrors (default: ./{DEFAULT_WORKDIR})",
    )
    parser.add_argument(
        "--destroy",
        action="store_true",
        dest="destroy",
        default=env_flag("GITMIRROR_DESTROY"),
        help="Delete the GitHub repo after a successful mirror (or GITMIRROR_DESTROY)",
    )
    parser.add_argument(
        "--push-method",
        dest="push_method",
        choices=[method.value for method in CloneMethod],
        default=os.getenv("GITMIRROR_PUSH_METHOD", CloneMethod.SSH.value),
        help="Git transport for archive and GitHub remotes (default: ssh)",
    )
    parser.add_argument(
        "--git-timeout",
        dest="git_timeout_s",
        type=float,
        default=os.getenv("GITMIRROR_GIT_TIMEOUT"),
        help="Seconds before a git command is abandoned (default: no timeout)",
    )
    parser.add_argument(
        "-d",
        "--dry-run",
        action="store_true",
        dest="dry_run",
        help="List actions without doing them",
    )


def _validate_parsed_arguments(args) -> None:
    """Validate and normalize parsed arguments in place."""
    try:
        args.workdir = SecurityValidator.validate_file_path(args.workdir)
        args.gh_api_url = SecurityValidator.validate_url(
            args.gh_api_url, ["https", "http"]
        )
        if args.org:
            args.org = SecurityValidator.validate_org(args.org)
        if args.origin:
            args.origin = SecurityValidator.validate_url(args.origin.strip())
        if args.git_timeout_s is not None:
            args.git_timeout_s = float(args.git_timeout_s)
            if args.git_timeout_s <= 0:
                raise ValueError("git timeout must be positive")
        CloneMethod(args.push_method)
    except ValueError as e:
        Logger.error(f"configuration validation error: {e}")
        sys.exit(EXIT_MISSING_ARGUMENTS)


def parse_arguments(argv: Optional[List[str]] = None) -> Config:
    """Parse command line arguments and return configuration object."""
    parser = _create_argument_parser()
    _add_source_arguments(parser)
    _add_behavior_arguments(parser)

    args = parser.parse_args(argv)
    _validate_parsed_arguments(args)

    if not args.token:
        Logger.error("error: github token not provided (use --token or GITHUB_TOKEN)")
        sys.exit(EXIT_AUTH_ERROR)

    return Config(
        github=GitHubConfig(
            api_url=args.gh_api_url.rstrip("/"),
            token=args.token,
            org=args.org,
        ),
        archive=ArchiveConfig(region=args.aws_region),
        git=GitOperationConfig(
            workdir=args.workdir,
            push_method=CloneMethod(args.push_method),
            timeout_s=args.git_timeout_s,
        ),
        run=RunConfig(
            command=Command(args.command),
            origin=args.origin,
            destroy=args.destroy,
            dry_run=args.dry_run,
        ),
    )
