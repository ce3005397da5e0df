"""
Counters describing a mirror session.

These are instrumentation only: nothing in the pipeline reads them to make a
decision and they never influence the exit status.
"""

from dataclasses import dataclass


@dataclass
class MirrorStats:
    """Tracks admitted, finished and concurrently running jobs."""

    admitted: int = 0
    succeeded: int = 0
    failed: int = 0
    in_flight: int = 0
    peak_in_flight: int = 0

    def job_started(self) -> None:
        self.admitted += 1
        self.in_flight += 1
        self.peak_in_flight = max(self.peak_in_flight, self.in_flight)

    def job_finished(self, success: bool) -> None:
        self.in_flight -= 1
        if success:
            self.succeeded += 1
        else:
            self.failed += 1
