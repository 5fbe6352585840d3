"""
Module: assembler.timing

Purpose:
    Timing instrumentation for import and export passes, so slow
    sources and phases show up in debug logs.

Key Classes:
    - TimingLog: Collects pass-level and per-source timing metrics

Key Functions:
    - timed_phase: Context manager for timing code blocks

Dependencies:
    - time (std)
    - contextlib (std)
    - dataclasses (std)

Used By:
    - assembler.importing.coordinator: Per-source decode timings
    - assembler.output.exporter: Load/compose/save timings
"""

from __future__ import annotations

import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Generator, List, Optional


@dataclass
class TimingLog:
    """
    Timing metrics for one pipeline pass.

    Attributes:
        pass_timings: Dict of phase_name -> duration_seconds
        source_timings: Dict of source name -> {phase_name -> duration_seconds}

    Example:
        >>> log = TimingLog("import")
        >>> log.log_pass("stage", 0.010)
        >>> log.log_source("report.pdf", "decode", 0.234)
        >>> print(log.summary())
    """
    label: str = "pass"
    pass_timings: Dict[str, float] = field(default_factory=dict)
    source_timings: Dict[str, Dict[str, float]] = field(default_factory=dict)

    def log_pass(self, phase: str, duration: float) -> None:
        """Log a pass-level timing metric."""
        self.pass_timings[phase] = duration

    def log_source(self, source: str, phase: str, duration: float) -> None:
        """Log a per-source timing metric."""
        self.source_timings.setdefault(source, {})[phase] = duration

    @property
    def total(self) -> float:
        """Sum of pass-level timings."""
        return sum(self.pass_timings.values())

    def get_slowest_sources(self, n: int = 3) -> List[tuple]:
        """Get the N slowest sources with their total time."""
        totals = [
            (source, sum(phases.values()))
            for source, phases in self.source_timings.items()
        ]
        totals.sort(key=lambda x: x[1], reverse=True)
        return totals[:n]

    def summary(self) -> str:
        """Generate human-readable timing summary."""
        lines = [f"=== {self.label.capitalize()} Timing Summary ==="]
        for phase, duration in sorted(self.pass_timings.items()):
            lines.append(f"  {phase:20s} {duration:.3f}s")

        slowest = self.get_slowest_sources()
        if slowest:
            lines.append("Slowest sources:")
            for source, total in slowest:
                lines.append(f"  {source}: {total:.3f}s")
        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        """Export timing data as dictionary."""
        return {
            "label": self.label,
            "pass_timings": self.pass_timings,
            "source_timings": self.source_timings,
            "total": self.total,
        }


@contextmanager
def timed_phase(
    log: TimingLog,
    phase: str,
    source: Optional[str] = None,
) -> Generator[None, None, None]:
    """
    Context manager for timing a code phase.

    Args:
        log: TimingLog instance to record metrics
        phase: Name of the phase being timed
        source: If provided, records as a per-source metric;
                otherwise records as a pass-level metric

    Example:
        >>> log = TimingLog("export")
        >>> with timed_phase(log, "load_sources"):
        ...     docs = load_all()
    """
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed = time.perf_counter() - start
        if source:
            log.log_source(source, phase, elapsed)
        else:
            log.log_pass(phase, elapsed)
