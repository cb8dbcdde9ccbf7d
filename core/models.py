"""
Typed results for one audit run: resolver configuration, per-probe results, domain report.
All values are immutable; a probe returns a result instead of raising, so callers
check `status` (found / absent / error) rather than catching exceptions.
"""
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional


class ProbeStatus(str, Enum):
    FOUND = "found"
    ABSENT = "absent"
    ERROR = "error"


class ErrorKind(str, Enum):
    RESOLVER_UNREACHABLE = "resolver_unreachable"
    DNS_LOOKUP_FAILURE = "dns_lookup_failure"
    HTTP_FETCH_FAILURE = "http_fetch_failure"
    INVALID_DOMAIN_INPUT = "invalid_domain_input"


class RecordKind(str, Enum):
    SPF = "spf"
    DMARC = "dmarc"
    MTA_STS = "mta_sts"
    TLS_RPT = "tls_rpt"
    BIMI = "bimi"


@dataclass(frozen=True)
class ProbeError:
    kind: ErrorKind
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"kind": self.kind.value, "message": self.message}


def dns_error(message: str) -> ProbeError:
    return ProbeError(ErrorKind.DNS_LOOKUP_FAILURE, message or "Unknown error")


@dataclass(frozen=True)
class ResolverConfig:
    """Nameserver used for every probe. Built once at startup, after the reachability check."""

    server: str
    verified: bool
    # Server the caller asked for (name or address as given)
    requested: Optional[str] = None
    fell_back: bool = False
    warning: Optional[str] = None


@dataclass(frozen=True)
class MxRecord:
    exchange: str
    preference: int
    ttl: Optional[int] = None

    def __post_init__(self) -> None:
        if self.preference < 0:
            raise ValueError(f"MX preference must be >= 0, got {self.preference}")


@dataclass(frozen=True)
class MxProbeResult:
    """MX records in resolver order (not re-sorted)."""

    name: str
    records: tuple[MxRecord, ...] = ()
    error: Optional[ProbeError] = None

    @property
    def count(self) -> int:
        return len(self.records)

    @property
    def status(self) -> ProbeStatus:
        if self.error is not None:
            return ProbeStatus.ERROR
        return ProbeStatus.FOUND if self.records else ProbeStatus.ABSENT

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "status": self.status.value,
            "count": self.count,
            "records": [
                {"exchange": r.exchange, "preference": r.preference, "ttl": r.ttl}
                for r in self.records
            ],
            "error": self.error.to_dict() if self.error else None,
        }


@dataclass(frozen=True)
class TxtProbeResult:
    """Outcome of a TXT-based check. Exactly one of: values present, absent, error."""

    kind: RecordKind
    name: str
    values: tuple[str, ...] = ()
    error: Optional[ProbeError] = None

    def __post_init__(self) -> None:
        if self.values and self.error is not None:
            raise ValueError("TxtProbeResult cannot carry both values and an error")

    @property
    def status(self) -> ProbeStatus:
        if self.error is not None:
            return ProbeStatus.ERROR
        return ProbeStatus.FOUND if self.values else ProbeStatus.ABSENT

    @property
    def found(self) -> bool:
        return self.status is ProbeStatus.FOUND

    @property
    def record(self) -> Optional[str]:
        """First value, or None."""
        return self.values[0] if self.values else None

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "name": self.name,
            "status": self.status.value,
            "values": list(self.values),
            "error": self.error.to_dict() if self.error else None,
        }


@dataclass(frozen=True)
class DkimPresenceResult:
    """Any answer at _domainkey.<domain>. Informational only."""

    name: str
    record_types: tuple[str, ...] = ()
    error: Optional[ProbeError] = None

    @property
    def found(self) -> bool:
        return bool(self.record_types)

    @property
    def status(self) -> ProbeStatus:
        if self.error is not None:
            return ProbeStatus.ERROR
        return ProbeStatus.FOUND if self.record_types else ProbeStatus.ABSENT

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "status": self.status.value,
            "record_types": list(self.record_types),
            "error": self.error.to_dict() if self.error else None,
        }


@dataclass(frozen=True)
class DkimSelectorResult:
    selector: str
    name: str
    found: bool
    provider: Optional[str] = None
    # Resolver message when not found (NXDOMAIN, timeout, ...)
    message: str = ""

    @property
    def status(self) -> ProbeStatus:
        return ProbeStatus.FOUND if self.found else ProbeStatus.ABSENT

    def to_dict(self) -> dict[str, Any]:
        return {
            "selector": self.selector,
            "name": self.name,
            "status": self.status.value,
            "provider": self.provider,
            "message": self.message or None,
        }


@dataclass(frozen=True)
class MtaStsPolicy:
    """Policy document fetched from https://mta-sts.<domain>/.well-known/mta-sts.txt."""

    url: str
    text: Optional[str] = None
    status_code: Optional[int] = None
    error: Optional[ProbeError] = None
    # Parsed key/values; read-only, list values stored as tuples
    fields: Mapping[str, Any] = field(default_factory=dict, compare=False)

    def __post_init__(self) -> None:
        frozen = {k: tuple(v) if isinstance(v, list) else v for k, v in self.fields.items()}
        object.__setattr__(self, "fields", MappingProxyType(frozen))

    @property
    def fetched(self) -> bool:
        return self.error is None and self.text is not None

    def to_dict(self) -> dict[str, Any]:
        return {
            "url": self.url,
            "fetched": self.fetched,
            "status_code": self.status_code,
            "text": self.text,
            "fields": {k: list(v) if isinstance(v, tuple) else v for k, v in self.fields.items()},
            "error": self.error.to_dict() if self.error else None,
        }


@dataclass(frozen=True)
class MtaStsResult:
    record: TxtProbeResult
    # None unless the TXT record was found
    policy: Optional[MtaStsPolicy] = None

    @property
    def status(self) -> ProbeStatus:
        return self.record.status

    def to_dict(self) -> dict[str, Any]:
        out = self.record.to_dict()
        out["policy"] = self.policy.to_dict() if self.policy else None
        return out


@dataclass(frozen=True)
class DomainReport:
    """Aggregate result for one domain; every field is set (found, absent or error)."""

    domain: str
    mx: MxProbeResult
    spf: TxtProbeResult
    dmarc: TxtProbeResult
    dkim: DkimPresenceResult
    dkim_selectors: tuple[DkimSelectorResult, ...]
    mta_sts: MtaStsResult
    tls_rpt: TxtProbeResult
    bimi: TxtProbeResult

    @property
    def dkim_selectors_found(self) -> list[str]:
        return [s.selector for s in self.dkim_selectors if s.found]

    def errors(self) -> list[tuple[str, ProbeError]]:
        """(field name, error) for every probe that failed, in probe order."""
        out = []
        for name, result in (
            ("mx", self.mx),
            ("spf", self.spf),
            ("dmarc", self.dmarc),
            ("dkim", self.dkim),
            ("mta_sts", self.mta_sts.record),
            ("tls_rpt", self.tls_rpt),
            ("bimi", self.bimi),
        ):
            if result.error is not None:
                out.append((name, result.error))
        if self.mta_sts.policy is not None and self.mta_sts.policy.error is not None:
            out.append(("mta_sts_policy", self.mta_sts.policy.error))
        return out

    def to_dict(self) -> dict[str, Any]:
        return {
            "domain": self.domain,
            "mx": self.mx.to_dict(),
            "spf": self.spf.to_dict(),
            "dmarc": self.dmarc.to_dict(),
            "dkim": self.dkim.to_dict(),
            "dkim_selectors": [s.to_dict() for s in self.dkim_selectors],
            "mta_sts": self.mta_sts.to_dict(),
            "tls_rpt": self.tls_rpt.to_dict(),
            "bimi": self.bimi.to_dict(),
        }
