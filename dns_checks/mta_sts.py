"""
MTA-STS: TXT record at _mta-sts.<domain>; when present, fetch the policy document from
https://mta-sts.<domain>/.well-known/mta-sts.txt. No fetch without the TXT record.
"""
import logging
from typing import Any

from core.constants import MTA_STS_LABEL, MTA_STS_POLICY_URL
from core.models import ErrorKind, MtaStsPolicy, MtaStsResult, ProbeError, RecordKind
from dns_checks.txt import query_txt_record

logger = logging.getLogger("mailaudit.dns")


def parse_policy(text: str) -> dict[str, Any]:
    """
    Key/value lines of a policy document ("mode: enforce"). `mx` may repeat and is a list;
    max_age is an int when numeric. Unknown keys are kept, malformed lines skipped.
    """
    fields: dict[str, Any] = {}
    mx: list[str] = []
    for line in (text or "").splitlines():
        if ":" not in line:
            continue
        k, v = line.split(":", 1)
        k, v = k.strip().lower(), v.strip()
        if not k:
            continue
        if k == "mx":
            mx.append(v)
        elif k == "max_age":
            fields[k] = int(v) if v.isdigit() else v
        elif k not in fields:
            fields[k] = v
    if mx:
        fields["mx"] = mx
    return fields


def fetch_policy(domain: str, fetcher) -> MtaStsPolicy:
    url = MTA_STS_POLICY_URL.format(domain=domain)
    body, status_code, error = fetcher.get(url)
    if error is not None or body is None:
        logger.debug("MTA-STS policy %s: %s", url, error)
        return MtaStsPolicy(
            url,
            status_code=status_code,
            error=ProbeError(ErrorKind.HTTP_FETCH_FAILURE, error or "Empty response"),
        )
    return MtaStsPolicy(url, text=body, status_code=status_code, fields=parse_policy(body))


def run(domain: str, resolver, fetcher) -> MtaStsResult:
    record = query_txt_record(RecordKind.MTA_STS, f"{MTA_STS_LABEL}.{domain}", resolver)
    if not record.found:
        return MtaStsResult(record)
    return MtaStsResult(record, policy=fetch_policy(domain, fetcher))
