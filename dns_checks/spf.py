"""
SPF record presence: TXT strings on the domain itself starting with "v=spf1 ".
Unrelated TXT strings are skipped. No mechanism parsing or duplicate detection.
"""
import logging

from core.constants import SPF_PREFIX
from core.models import RecordKind, TxtProbeResult, dns_error

logger = logging.getLogger("mailaudit.dns")


def is_spf_record(txt: str) -> bool:
    return txt.startswith(SPF_PREFIX)


def run(domain: str, resolver) -> TxtProbeResult:
    txts, status, message = resolver.resolve(domain, "TXT")
    if status not in ("ok", "empty"):
        return TxtProbeResult(RecordKind.SPF, domain, error=dns_error(message or status))
    spf_records = tuple(t for t in txts if is_spf_record(t))
    if len(spf_records) > 1:
        logger.debug("SPF %s: %d records published", domain, len(spf_records))
    return TxtProbeResult(RecordKind.SPF, domain, values=spf_records)
