"""
Progress reporting: current domain, total domains, elapsed time, percentage, remaining.
"""
import time
from typing import Optional


class ProgressReporter:
    """Reports current domain, total domains, elapsed time, percentage, and remaining."""

    def __init__(self, total_steps: int, verbose: bool = False, quiet: bool = False):
        self.total_steps = total_steps
        self.current_step = 0
        self.start_time: Optional[float] = None
        self.step_start_time: Optional[float] = None
        self.verbose = verbose
        self.quiet = quiet

    def start(self, step_names: Optional[list[str]] = None) -> None:
        """Call at audit start. step_names: optional list to show the full domain plan."""
        self.start_time = time.perf_counter()
        self.current_step = 0
        self._print_header(step_names)

    def _print_header(self, step_names: Optional[list[str]] = None) -> None:
        if self.quiet:
            return
        print(f"\n  Domains: {self.total_steps} total")
        if step_names and self.verbose:
            pad = max(2, len(str(len(step_names))))
            for i, name in enumerate(step_names, 1):
                print(f"    {i:0{pad}d}. {name}")
        print("  " + "-" * 60)

    def advance(self, step_name: str) -> None:
        """Call before each domain is probed. step_name: e.g. "example.com"."""
        self.current_step += 1
        self.step_start_time = time.perf_counter()
        elapsed = (self.step_start_time - self.start_time) if self.start_time else 0
        pct = (self.current_step / self.total_steps * 100) if self.total_steps else 0
        remaining = self.total_steps - self.current_step

        if self.quiet:
            return
        # [02/05] example.org  (1.2s) - 40% complete, 3 domains left
        pad = max(2, len(str(self.total_steps)))
        line = f"  [{self.current_step:0{pad}d}/{self.total_steps:0{pad}d}] {step_name}"
        if elapsed > 0:
            line += f"  ({elapsed:.1f}s)"
        line += f"  - {pct:.0f}% complete"
        if remaining > 0:
            line += f", {remaining} domain{'s' if remaining != 1 else ''} left"
        print(line, flush=True)

    def step_done(self, detail: Optional[str] = None) -> None:
        """Call after a domain is done to optionally print duration / result."""
        if self.quiet or not detail or not self.verbose:
            return
        elapsed = (time.perf_counter() - self.step_start_time) if self.step_start_time else 0
        print(f"       ok {detail} ({elapsed:.2f}s)", flush=True)

    def done(self) -> None:
        """Call when the audit is complete."""
        if self.start_time is None:
            return
        total_elapsed = time.perf_counter() - self.start_time
        if self.quiet:
            print(f"MailAudit: Audited {self.current_step} domain(s) in {total_elapsed:.1f}s", flush=True)
            return
        print("  " + "-" * 60)
        print(f"  Completed: {self.current_step} domain(s) in {total_elapsed:.1f}s")
        print(flush=True)
