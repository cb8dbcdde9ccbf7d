"""
Shared TXT lookup for records published under a service label (DMARC, MTA-STS, TLS-RPT, BIMI).
Values are reported verbatim; any lookup failure, including NXDOMAIN, becomes an error result.
"""
import logging

from core.models import RecordKind, TxtProbeResult, dns_error

logger = logging.getLogger("mailaudit.dns")


def query_txt_record(kind: RecordKind, name: str, resolver) -> TxtProbeResult:
    txts, status, message = resolver.resolve(name, "TXT")
    if status == "ok" and txts:
        return TxtProbeResult(kind, name, values=tuple(txts))
    logger.debug("%s %s: status=%s %s", kind.value, name, status, message)
    return TxtProbeResult(kind, name, error=dns_error(message or status))
