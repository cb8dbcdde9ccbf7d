"""
Run state for one audit: input domains, options, and collected results.
Probe results live in immutable DomainReport values; this holds only run-level state.
"""
from dataclasses import dataclass, field
from typing import Any, Optional, TYPE_CHECKING

from core.models import DomainReport, ResolverConfig

if TYPE_CHECKING:
    from core.progress import ProgressReporter


@dataclass
class AuditContext:
    """Holds input domains and audit configuration."""

    domains: list[str]
    # Requested nameserver (None = default); resolved to resolver_config at scan start
    nameserver: Optional[str] = None
    dkim_selector: Optional[str] = None
    bimi_selector: Optional[str] = None
    verbose: bool = False
    quiet: bool = False
    log_file: Optional[str] = None

    # Output: directory for report files, format (text | json | markdown | all)
    output_dir: Optional[str] = None
    output_format: str = "text"

    # Timeouts (seconds): per DNS query, per HTTPS fetch (None = use defaults)
    dns_timeout: Optional[float] = None
    http_timeout: Optional[float] = None

    # Set by scanner
    progress: Optional["ProgressReporter"] = None
    resolver_config: Optional[ResolverConfig] = None

    reports: list[DomainReport] = field(default_factory=list)
    # Inputs rejected before probing: {"domain", "reason"}
    skipped: list[dict[str, str]] = field(default_factory=list)
    # Step failures outside the probes (report writers); audit continues
    step_errors: list[dict[str, str]] = field(default_factory=list)

    def add_report(self, report: DomainReport) -> None:
        self.reports.append(report)

    def add_skipped(self, domain: str, reason: str) -> None:
        """Record an input domain rejected by validation."""
        self.skipped.append({"domain": domain, "reason": reason})

    def add_step_error(self, step: str, error: str) -> None:
        """Record a step failure; audit continues."""
        self.step_errors.append({"step": step, "error": error})

    def summary(self) -> dict[str, Any]:
        """Counts for the final log line and report headers."""
        with_errors = sum(1 for r in self.reports if r.errors())
        return {
            "domains": len(self.reports),
            "skipped": len(self.skipped),
            "domains_with_errors": with_errors,
        }
