"""
DKIM checks: presence of the _domainkey.<domain> namespace (any record type) and
existence of well-known selectors at <selector>._domainkey.<domain>.
Selectors are provider-chosen and cannot be listed without a zone transfer, so only
the known table plus one optional caller-supplied selector is queried.
"""
import logging

from core.constants import DKIM_NAMESPACE_LABEL, KNOWN_DKIM_SELECTORS
from core.models import DkimPresenceResult, DkimSelectorResult, dns_error

logger = logging.getLogger("mailaudit.dns")


def run_presence(domain: str, resolver) -> DkimPresenceResult:
    """
    Best-effort signal only: an answer means the namespace "may contain selectors".
    Many servers answer ANY minimally (RFC 8482) or not at all, so absence proves nothing.
    """
    name = f"{DKIM_NAMESPACE_LABEL}.{domain}"
    types, status, message = resolver.resolve(name, "ANY")
    if status == "ok" and types:
        return DkimPresenceResult(name, record_types=tuple(types))
    return DkimPresenceResult(name, error=dns_error(message or status))


def _check_selector(domain: str, selector: str, provider: str | None, resolver) -> DkimSelectorResult:
    name = f"{selector}.{DKIM_NAMESPACE_LABEL}.{domain}"
    records, status, message = resolver.resolve(name, "TXT")
    found = status == "ok" and bool(records)
    if found:
        logger.debug("DKIM selector found: %s", name)
    return DkimSelectorResult(selector, name, found, provider, "" if found else (message or status))


def run_selectors(domain: str, resolver, custom_selector: str | None = None) -> tuple[DkimSelectorResult, ...]:
    results = [_check_selector(domain, sel, provider, resolver) for sel, provider in KNOWN_DKIM_SELECTORS]
    custom = (custom_selector or "").strip().lower()
    if custom:
        results.append(_check_selector(domain, custom, None, resolver))
    return tuple(results)
