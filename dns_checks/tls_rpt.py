"""
SMTP TLS Reporting record at _smtp._tls.<domain>.
"""
from core.constants import TLS_RPT_LABEL
from core.models import RecordKind, TxtProbeResult
from dns_checks.txt import query_txt_record


def run(domain: str, resolver) -> TxtProbeResult:
    return query_txt_record(RecordKind.TLS_RPT, f"{TLS_RPT_LABEL}.{domain}", resolver)
