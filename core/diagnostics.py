#!/usr/bin/env python3
"""
Diagnostics Module
Progress logging and structured, non-fatal conversion diagnostics.

Every stage logs through a progress callback (GUI/CLI hook) and stdout.
Recoverable problems are additionally recorded as Diagnostic entries so a
batch import can be audited after it finishes.
"""

from dataclasses import dataclass
from typing import Callable, List, Optional

WARNING = 'warning'
ERROR = 'error'


@dataclass(frozen=True)
class Diagnostic:
    """One recorded problem

    Attributes:
        level: 'warning' or 'error'
        message: Human-readable description
        document: Source document path being converted, if any
        node: Node name or animation path the problem concerns
        field: Source attribute/element involved
    """
    level: str
    message: str
    document: Optional[str] = None
    node: Optional[str] = None
    field: Optional[str] = None

    def __str__(self):
        where = []
        if self.document:
            where.append(self.document)
        if self.node:
            where.append(f"node '{self.node}'")
        if self.field:
            where.append(f"field '{self.field}'")
        prefix = f"[{', '.join(where)}] " if where else ''
        return prefix + self.message


class DiagnosticLog:
    """Collects diagnostics for one import run and echoes them as progress messages"""

    def __init__(self, progress_callback: Optional[Callable[[str], None]] = None):
        """Initialize diagnostic log

        Args:
            progress_callback: Optional function to call for progress updates
                              Signature: callback(message: str) -> None
        """
        self.progress_callback = progress_callback
        self.entries: List[Diagnostic] = []
        self.document: Optional[str] = None

    def log(self, message):
        """Send progress/status message"""
        if self.progress_callback:
            self.progress_callback(message)
        print(message)

    def warn(self, message, node=None, field=None):
        return self._record(WARNING, message, node, field)

    def error(self, message, node=None, field=None):
        return self._record(ERROR, message, node, field)

    def _record(self, level, message, node, field):
        entry = Diagnostic(level, message, self.document, node, field)
        self.entries.append(entry)
        mark = '⚠' if level == WARNING else '✗'
        self.log(f"  {mark} {entry}")
        return entry

    def warnings(self) -> List[Diagnostic]:
        return [d for d in self.entries if d.level == WARNING]

    def errors(self) -> List[Diagnostic]:
        return [d for d in self.entries if d.level == ERROR]

    def get_summary(self):
        """Generate human-readable summary of recorded diagnostics

        Returns:
            str: Formatted summary text
        """
        lines = [f"Diagnostics: {len(self.warnings())} warning(s), {len(self.errors())} error(s)"]
        for entry in self.errors():
            lines.append(f"  ✗ {entry}")
        return "\n".join(lines)
