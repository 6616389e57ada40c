"""
Build log for docbuilder runs.

Appends one JSON line per package outcome so past runs can be inspected
after the console output is gone.
"""

import json
from pathlib import Path
from datetime import datetime
from typing import Dict, Optional
from dataclasses import dataclass, asdict

from docbuilder.schemas import PackageBuildReport


@dataclass
class BuildLogEntry:
    """Log entry for one package processed by a build run."""
    timestamp: str
    package_name: str
    status: str
    message: str
    clone_dir: Optional[str] = None
    docs_build_dir: Optional[str] = None


class BuildLogger:
    """Writes package build outcomes to a JSONL file and keeps counters."""

    def __init__(self, log_file: Path):
        """
        Initialize the build logger.

        Args:
            log_file: Path to the JSONL build log
        """
        self.log_file = Path(log_file)

        self.log_file.parent.mkdir(parents=True, exist_ok=True)
        self.log_file.touch(exist_ok=True)

        self.stats = {
            "built": 0,
            "skipped": 0,
            "failed": 0
        }

    def log_report(self, report: PackageBuildReport):
        """
        Record a package build report.

        Args:
            report: Outcome of building one package
        """
        entry = BuildLogEntry(
            timestamp=report.completed_at or datetime.now().isoformat(),
            package_name=report.package_name,
            status=report.status.value,
            message=report.message,
            clone_dir=report.clone_dir,
            docs_build_dir=report.docs_build_dir,
        )

        with open(self.log_file, 'a') as f:
            f.write(json.dumps(asdict(entry)) + '\n')

        if report.status.is_skip:
            self.stats["skipped"] += 1
        elif report.status.is_failure:
            self.stats["failed"] += 1
        else:
            self.stats["built"] += 1

    def get_stats(self) -> Dict[str, int]:
        """Get build statistics."""
        return self.stats.copy()
