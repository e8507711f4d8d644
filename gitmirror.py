#!/usr/bin/env python3
"""
gitmirror - Batch-archive GitHub repositories to AWS CodeCommit and restore
them again.

Each repository is mirror-cloned into a local working directory, pushed with
all branches and tags to an archive repository, and can later be pushed back
to a (re-created) GitHub repository. Re-runs update existing mirrors in place
and a failing repository never stops the rest of the batch.
"""

from __future__ import annotations

import sys
from typing import List, NoReturn, Optional

from argument_parser import parse_arguments
from config import Command
from mirror_orchestrator import MirrorOrchestrator
from restore_orchestrator import RestoreOrchestrator

ORCHESTRATORS = {
    Command.MIRROR: MirrorOrchestrator,
    Command.RESTORE: RestoreOrchestrator,
}


def main(argv: Optional[List[str]] = None) -> NoReturn:
    cfg = parse_arguments(argv)
    orchestrator = ORCHESTRATORS[cfg.run.command](cfg)
    sys.exit(orchestrator.run())


if __name__ == "__main__":
    main()
