"""
Exceptions raised at the edges of the audit (input validation, resolver setup).
Probe failures are never raised; they are stored in the report as ProbeError values.
"""


class MailAuditError(Exception):
    """Base class for MailAudit errors."""


class InvalidDomainError(MailAuditError, ValueError):
    """Supplied domain name is empty or not a plausible host name."""

    def __init__(self, domain: str, reason: str):
        self.domain = domain
        self.reason = reason
        super().__init__(f"Invalid domain {domain!r}: {reason}")


class ResolverUnreachableError(MailAuditError):
    """Nameserver did not answer the reachability check."""

    def __init__(self, server: str, reason: str):
        self.server = server
        self.reason = reason
        super().__init__(f"Nameserver {server} unreachable: {reason}")
