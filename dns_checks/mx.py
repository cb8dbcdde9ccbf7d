"""
MX lookup. Records kept in resolver order; a failed lookup is reported with its message,
distinct from a domain that answers but publishes no MX.
"""
import logging

from core.models import MxProbeResult, dns_error

logger = logging.getLogger("mailaudit.dns")


def run(domain: str, resolver) -> MxProbeResult:
    records, status, message = resolver.resolve(domain, "MX")
    if status == "ok":
        logger.debug("MX %s: %d record(s)", domain, len(records))
        return MxProbeResult(domain, records=tuple(records))
    if status == "empty":
        return MxProbeResult(domain)
    return MxProbeResult(domain, error=dns_error(message or status))
