#!/usr/bin/env python3
"""Per-run statistics accumulated by the orchestrators."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from logging_utils import Logger
from utils import indent_lines


@dataclass
class RunStats:
    """Outcome counts for one batch, in processing order.

    ``skipped`` holds the original repository URLs. One instance is created
    per run and passed into the batch loop.
    """
    total: int = 0
    success: int = 0
    skipped: List[str] = field(default_factory=list)

    def record_success(self) -> None:
        self.total += 1
        self.success += 1

    def record_skip(self, url: str) -> None:
        self.total += 1
        self.skipped.append(url)

    def summary_lines(self) -> List[str]:
        lines = [
            f"total: {self.total}, success: {self.success}, "
            f"skipped: {len(self.skipped)}"
        ]
        if self.skipped:
            lines.append("skipped repositories:")
            lines.extend(indent_lines(self.skipped))
        return lines

    def report(self) -> None:
        lines = self.summary_lines()
        Logger.info(lines[0])
        for line in lines[1:]:
            Logger.warn(line)
