"""
BIMI (Brand Indicators for Message Identification) record at <selector>._bimi.<domain>.
"""
from core.constants import BIMI_LABEL, DEFAULT_BIMI_SELECTOR
from core.models import RecordKind, TxtProbeResult
from dns_checks.txt import query_txt_record


def run(domain: str, resolver, selector: str | None = None) -> TxtProbeResult:
    selector = (selector or "").strip() or DEFAULT_BIMI_SELECTOR
    return query_txt_record(RecordKind.BIMI, f"{selector}.{BIMI_LABEL}.{domain}", resolver)
