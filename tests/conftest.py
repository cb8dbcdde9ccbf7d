"""Test configuration and fixtures for MailAudit."""

import pytest

from core.models import MxRecord, ResolverConfig


class FakeResolver:
    """
    Stand-in for ResolverClient. answers maps (name, rtype) to a list of records
    (status ok) or to a (status, message) tuple for failures. Unknown names are NXDOMAIN.
    """

    def __init__(self, answers=None, default=None):
        self.config = ResolverConfig(server="192.0.2.53", verified=True, requested="192.0.2.53")
        self.answers = dict(answers or {})
        self.default = default
        self.calls: list[tuple[str, str]] = []

    def resolve(self, name, rtype):
        self.calls.append((name, rtype))
        value = self.answers.get((name, rtype), self.default)
        if value is None:
            return ([], "nxdomain", f"{name} does not exist (NXDOMAIN)")
        if isinstance(value, tuple):
            status, message = value
            return ([], status, message)
        if not value:
            return ([], "empty", f"No {rtype} records for {name}")
        return (list(value), "ok", "")


class FakeFetcher:
    """Stand-in for PolicyFetcher. responses maps url to (body, status_code, error)."""

    def __init__(self, responses=None):
        self.responses = dict(responses or {})
        self.calls: list[str] = []

    def get(self, url):
        self.calls.append(url)
        return self.responses.get(url, (None, None, "Unreachable: connection refused"))


@pytest.fixture
def fake_fetcher() -> FakeFetcher:
    return FakeFetcher()


@pytest.fixture
def example_answers() -> dict:
    """DNS state for example.com used by the end-to-end scenario."""
    return {
        ("example.com", "MX"): [MxRecord("mx1.example.com", 10, 300), MxRecord("mx2.example.com", 20, 300)],
        ("example.com", "TXT"): ["v=spf1 include:_spf.example.com ~all"],
        ("_dmarc.example.com", "TXT"): ["v=DMARC1; p=reject;"],
        ("_domainkey.example.com", "ANY"): ("nxdomain", "_domainkey.example.com does not exist (NXDOMAIN)"),
        ("selector1._domainkey.example.com", "TXT"): ["v=DKIM1; k=rsa; p=MIGfMA0GCSqGSIb3DQEBAQUAA4GNADCBiQKBgQC"],
    }


@pytest.fixture
def example_resolver(example_answers) -> FakeResolver:
    return FakeResolver(example_answers)


@pytest.fixture
def unreachable_resolver() -> FakeResolver:
    """Every query times out."""
    return FakeResolver(default=("timeout", "Timeout querying (no nameserver reachable)"))
