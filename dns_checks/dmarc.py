"""
DMARC record at _dmarc.<domain>, reported verbatim.
"""
from core.constants import DMARC_LABEL
from core.models import RecordKind, TxtProbeResult
from core.utils import parse_tag_list
from dns_checks.txt import query_txt_record


def run(domain: str, resolver) -> TxtProbeResult:
    return query_txt_record(RecordKind.DMARC, f"{DMARC_LABEL}.{domain}", resolver)


def policy(result: TxtProbeResult) -> str | None:
    """p= tag of the first record, for display. None when absent or not set."""
    if not result.record:
        return None
    return parse_tag_list(result.record).get("p") or None
