"""
Common utilities: domain name normalization and validation, tag-list parsing.
"""
import ipaddress
import re

from core.errors import InvalidDomainError

# RFC 1035: max label 63, total domain 253; label: [a-zA-Z0-9]([a-zA-Z0-9-]*[a-zA-Z0-9])?
# Leading underscore allowed so service names (_dmarc.example.com) can be audited directly.
DOMAIN_LABEL_RE = re.compile(r"^_?[a-zA-Z0-9]([a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?$")
MAX_DOMAIN_LENGTH = 253


def _is_ip_address(s: str) -> bool:
    """Return True if s is a valid IPv4 or IPv6 address."""
    try:
        ipaddress.ip_address(s.strip())
        return True
    except ValueError:
        return False


def normalize_domain(domain: str) -> str:
    """Strip whitespace, lowercase, drop a single trailing dot."""
    d = (domain or "").strip().lower()
    if d.endswith("."):
        d = d[:-1]
    return d


def validate_domain(domain: str) -> str:
    """
    Normalize and validate a domain name; return the normalized name.
    Raises InvalidDomainError if empty, an IP address, too long, or with a bad label.
    """
    raw = domain
    domain = normalize_domain(domain)
    if not domain:
        raise InvalidDomainError(raw or "", "empty domain name")
    if len(domain) > MAX_DOMAIN_LENGTH:
        raise InvalidDomainError(raw, f"length exceeds {MAX_DOMAIN_LENGTH} characters")
    if _is_ip_address(domain):
        raise InvalidDomainError(raw, "IP address given, expected a domain name")
    labels = domain.split(".")
    if len(labels) < 2:
        raise InvalidDomainError(raw, "expected at least two labels (e.g. example.com)")
    for label in labels:
        if not label:
            raise InvalidDomainError(raw, "empty label (consecutive dots)")
        if len(label) > 63:
            raise InvalidDomainError(raw, "label length exceeds 63 characters")
        if not DOMAIN_LABEL_RE.match(label):
            raise InvalidDomainError(raw, f"invalid label {label!r}")
    return domain


def parse_tag_list(record: str) -> dict[str, str]:
    """
    Parse a `k=v; k=v` tag list (DMARC, TLS-RPT, BIMI, MTA-STS TXT) into a dict.
    Keys are lowercased; values kept as written. Later duplicates are ignored.
    """
    tags: dict[str, str] = {}
    for part in (record or "").split(";"):
        part = part.strip()
        if not part or "=" not in part:
            continue
        k, v = part.split("=", 1)
        k = k.strip().lower()
        if k and k not in tags:
            tags[k] = v.strip()
    return tags
