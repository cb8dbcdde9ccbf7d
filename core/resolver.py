"""
DNS resolver client pinned to one nameserver.
Single attempt per query; failures come back as (data, status, message) with a clear
ok/empty/nxdomain/timeout/error status instead of raising, so one failed record
never aborts the other probes for the same domain.
"""
import ipaddress
import logging
import socket
from typing import Any, Optional

import dns.exception
import dns.flags
import dns.message
import dns.query
import dns.rcode
import dns.rdatatype
import dns.resolver

from core import constants
from core.errors import ResolverUnreachableError
from core.models import MxRecord, ResolverConfig

logger = logging.getLogger("mailaudit.dns")


def _extract_mx(answers) -> list[MxRecord]:
    ttl = answers.rrset.ttl if answers.rrset is not None else None
    return [MxRecord(str(r.exchange).rstrip("."), int(r.preference), ttl) for r in answers]


def _extract_txt(answers) -> list[str]:
    return [b"".join(r.strings).decode("utf-8", errors="replace") for r in answers]


def _extract_a(answers) -> list[str]:
    return [str(r.address) for r in answers]


def _extract_generic(answers) -> list[str]:
    return [r.to_text() for r in answers]


_EXTRACTORS = {
    "MX": _extract_mx,
    "TXT": _extract_txt,
    "A": _extract_a,
    "AAAA": _extract_a,
}


def nameserver_address(server: str) -> str:
    """Return server as an IP address; host names are looked up with the system resolver."""
    server = (server or "").strip()
    if not server:
        raise ResolverUnreachableError(server, "empty nameserver address")
    try:
        ipaddress.ip_address(server)
        return server
    except ValueError:
        pass
    try:
        return socket.gethostbyname(server)
    except (socket.gaierror, UnicodeError) as e:
        raise ResolverUnreachableError(server, f"cannot resolve nameserver name: {e}") from e


class ResolverClient:
    """Runs DNS queries against the nameserver in `config`."""

    def __init__(
        self,
        config: ResolverConfig,
        timeout: Optional[float] = None,
        port: int = constants.DNS_PORT,
    ):
        self.config = config
        self.timeout = float(timeout) if timeout else constants.DNS_TIMEOUT
        self.port = port
        self._resolver = dns.resolver.Resolver(configure=False)
        # port before nameservers: the nameserver list picks up the port on assignment
        self._resolver.port = port
        self._resolver.nameservers = [config.server]
        # lifetime == timeout: a timed-out query is not resent
        self._resolver.timeout = self.timeout
        self._resolver.lifetime = self.timeout

    def resolve(self, name: str, rtype: str) -> tuple[list[Any], str, str]:
        """
        Resolve one record set. Returns (data_list, status, message).
        status: ok | empty | nxdomain | timeout | error
        rtype "ANY" is sent as a raw query (the stub resolver refuses metaqueries).
        """
        rtype = rtype.upper()
        if rtype == "ANY":
            return self._resolve_any(name)
        extract = _EXTRACTORS.get(rtype, _extract_generic)
        try:
            answers = self._resolver.resolve(name, rtype)
            data = extract(answers)
            if data:
                return (data, "ok", "")
            return ([], "empty", "No records")
        except dns.resolver.NXDOMAIN:
            return ([], "nxdomain", f"{name} does not exist (NXDOMAIN)")
        except dns.resolver.NoAnswer:
            return ([], "empty", f"No {rtype} records for {name}")
        except dns.resolver.NoNameservers as e:
            logger.debug("%s %s: no nameservers: %s", rtype, name, e)
            return ([], "error", f"No nameserver answered for {name} ({rtype}): SERVFAIL or refused")
        except dns.exception.Timeout:
            return ([], "timeout", f"Timeout querying {name} ({rtype}) at {self.config.server}")
        except (dns.exception.DNSException, OSError, ValueError) as e:
            logger.debug("%s %s failed: %s", rtype, name, e)
            return ([], "error", str(e) or e.__class__.__name__)

    def _resolve_any(self, name: str) -> tuple[list[str], str, str]:
        """Returns record type names present in the answer section."""
        try:
            query = dns.message.make_query(name, dns.rdatatype.ANY)
            response = dns.query.udp(query, self.config.server, timeout=self.timeout, port=self.port)
            if response.flags & dns.flags.TC:
                response = dns.query.tcp(query, self.config.server, timeout=self.timeout, port=self.port)
        except dns.exception.Timeout:
            return ([], "timeout", f"Timeout querying {name} (ANY) at {self.config.server}")
        except (dns.exception.DNSException, OSError, ValueError) as e:
            logger.debug("ANY %s failed: %s", name, e)
            return ([], "error", str(e) or e.__class__.__name__)
        rcode = response.rcode()
        if rcode == dns.rcode.NXDOMAIN:
            return ([], "nxdomain", f"{name} does not exist (NXDOMAIN)")
        if rcode != dns.rcode.NOERROR:
            return ([], "error", f"{name} (ANY): {dns.rcode.to_text(rcode)}")
        types = []
        for rrset in response.answer:
            t = dns.rdatatype.to_text(rrset.rdtype)
            if t not in types:
                types.append(t)
        if types:
            return (types, "ok", "")
        return ([], "empty", f"No records for {name}")


def check_nameserver(address: str, timeout: Optional[float] = None) -> tuple[bool, str]:
    """A-record lookup for the control domain. Returns (ok, message)."""
    probe = ResolverClient(ResolverConfig(server=address, verified=False), timeout=timeout)
    data, status, message = probe.resolve(constants.CONTROL_DOMAIN, "A")
    if status == "ok" and data:
        return (True, "")
    return (False, message or status)


def build_resolver_config(server: Optional[str] = None, timeout: Optional[float] = None) -> ResolverConfig:
    """
    Verify the requested nameserver (default when None) and return an immutable config.
    On failure fall back to DEFAULT_NAMESERVER and attach a warning; never fatal.
    """
    requested = (server or "").strip() or constants.DEFAULT_NAMESERVER
    try:
        address = nameserver_address(requested)
        ok, reason = check_nameserver(address, timeout=timeout)
        if ok:
            logger.debug("Nameserver %s (%s) answered control query", requested, address)
            return ResolverConfig(server=address, verified=True, requested=requested)
    except ResolverUnreachableError as e:
        reason = e.reason

    if requested == constants.DEFAULT_NAMESERVER:
        warning = f"Default nameserver {requested} failed reachability check: {reason}"
        logger.warning("%s; continuing anyway", warning)
        return ResolverConfig(server=requested, verified=False, requested=requested, warning=warning)

    default_ok, default_reason = check_nameserver(constants.DEFAULT_NAMESERVER, timeout=timeout)
    warning = (
        f"Nameserver {requested} unreachable ({reason}); "
        f"falling back to default {constants.DEFAULT_NAMESERVER}"
    )
    if not default_ok:
        warning += f" (default also failed: {default_reason})"
    logger.warning(warning)
    return ResolverConfig(
        server=constants.DEFAULT_NAMESERVER,
        verified=default_ok,
        requested=requested,
        fell_back=True,
        warning=warning,
    )
