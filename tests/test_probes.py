"""Tests for the record probes."""

from conftest import FakeFetcher, FakeResolver

from core.models import ErrorKind, MxRecord, ProbeStatus, RecordKind
from dns_checks import bimi, dkim, dmarc, mta_sts, mx, spf, tls_rpt


class TestMxProbe:
    """Test MX lookup classification."""

    def test_records_kept_in_resolver_order(self):
        records = [MxRecord("mx2.example.com", 20), MxRecord("mx1.example.com", 10)]
        resolver = FakeResolver({("example.com", "MX"): records})

        result = mx.run("example.com", resolver)

        assert result.status is ProbeStatus.FOUND
        assert result.count == 2
        assert [r.exchange for r in result.records] == ["mx2.example.com", "mx1.example.com"]

    def test_no_answer_is_absent(self):
        resolver = FakeResolver({("example.com", "MX"): []})

        result = mx.run("example.com", resolver)

        assert result.status is ProbeStatus.ABSENT
        assert result.count == 0
        assert result.error is None

    def test_nxdomain_is_lookup_failure_with_message(self):
        result = mx.run("missing.example", FakeResolver())

        assert result.status is ProbeStatus.ERROR
        assert result.error.kind is ErrorKind.DNS_LOOKUP_FAILURE
        assert "NXDOMAIN" in result.error.message


class TestSpfProbe:
    """Test SPF prefix detection."""

    def test_spf_prefix_found_with_exact_string(self):
        record = "v=spf1 include:_spf.example.com ~all"
        resolver = FakeResolver({("example.com", "TXT"): ["google-site-verification=abc", record]})

        result = spf.run("example.com", resolver)

        assert result.kind is RecordKind.SPF
        assert result.status is ProbeStatus.FOUND
        assert result.record == record
        assert result.values == (record,)

    def test_no_spf_prefix_is_absent(self):
        resolver = FakeResolver({("example.com", "TXT"): ["google-site-verification=abc", "MS=ms123"]})

        result = spf.run("example.com", resolver)

        assert result.status is ProbeStatus.ABSENT
        assert result.error is None

    def test_prefix_requires_trailing_space(self):
        resolver = FakeResolver({("example.com", "TXT"): ["v=spf1", "v=spf10 -all"]})

        assert spf.run("example.com", resolver).status is ProbeStatus.ABSENT

    def test_empty_txt_answer_is_absent(self):
        resolver = FakeResolver({("example.com", "TXT"): []})

        assert spf.run("example.com", resolver).status is ProbeStatus.ABSENT

    def test_multiple_spf_records_all_reported(self):
        first, second = "v=spf1 mx -all", "v=spf1 a -all"
        resolver = FakeResolver({("example.com", "TXT"): [first, second]})

        result = spf.run("example.com", resolver)

        assert result.values == (first, second)
        assert result.record == first

    def test_timeout_is_error(self):
        resolver = FakeResolver({("example.com", "TXT"): ("timeout", "Timeout querying example.com")})

        result = spf.run("example.com", resolver)

        assert result.status is ProbeStatus.ERROR
        assert result.error.message == "Timeout querying example.com"


class TestDmarcProbe:
    """Test DMARC lookup."""

    def test_record_reported_verbatim(self):
        raw = "v=DMARC1;p=reject; rua=mailto:d@example.com ;"
        resolver = FakeResolver({("_dmarc.example.com", "TXT"): [raw]})

        result = dmarc.run("example.com", resolver)

        assert result.status is ProbeStatus.FOUND
        assert result.values == (raw,)
        assert result.name == "_dmarc.example.com"
        assert resolver.calls == [("_dmarc.example.com", "TXT")]

    def test_no_prefix_validation(self):
        resolver = FakeResolver({("_dmarc.example.com", "TXT"): ["something else"]})

        assert dmarc.run("example.com", resolver).record == "something else"

    def test_missing_record_is_error(self):
        result = dmarc.run("example.com", FakeResolver())

        assert result.status is ProbeStatus.ERROR
        assert "NXDOMAIN" in result.error.message

    def test_policy_tag(self):
        resolver = FakeResolver({("_dmarc.example.com", "TXT"): ["v=DMARC1; p=quarantine; pct=50"]})

        assert dmarc.policy(dmarc.run("example.com", resolver)) == "quarantine"
        assert dmarc.policy(dmarc.run("example.com", FakeResolver())) is None


class TestDkimProbes:
    """Test DKIM namespace presence and known selectors."""

    def test_presence_found_on_any_answer(self):
        resolver = FakeResolver({("_domainkey.example.com", "ANY"): ["CNAME"]})

        result = dkim.run_presence("example.com", resolver)

        assert result.found
        assert result.record_types == ("CNAME",)

    def test_presence_failure_kept_as_error(self):
        result = dkim.run_presence("example.com", FakeResolver())

        assert not result.found
        assert result.status is ProbeStatus.ERROR

    def test_known_selectors_queried_in_table_order(self):
        resolver = FakeResolver({("k1._domainkey.example.com", "TXT"): ["v=DKIM1; p=abc"]})

        results = dkim.run_selectors("example.com", resolver)

        assert [r.selector for r in results] == ["selector1", "selector2", "k1"]
        assert [r.found for r in results] == [False, False, True]
        assert results[0].provider == "Microsoft 365"
        assert results[2].name == "k1._domainkey.example.com"

    def test_missing_selector_is_absent_not_error(self):
        results = dkim.run_selectors("example.com", FakeResolver())

        k1 = results[2]
        assert k1.status is ProbeStatus.ABSENT
        assert "NXDOMAIN" in k1.message

    def test_selector_result_is_idempotent(self):
        resolver = FakeResolver({("k1._domainkey.example.com", "TXT"): ["v=DKIM1; p=abc"]})

        first = dkim.run_selectors("example.com", resolver)
        second = dkim.run_selectors("example.com", resolver)

        assert first == second

    def test_custom_selector_appended(self):
        resolver = FakeResolver({("google._domainkey.example.com", "TXT"): ["v=DKIM1; p=xyz"]})

        results = dkim.run_selectors("example.com", resolver, custom_selector=" Google ")

        assert len(results) == 4
        assert results[-1].selector == "google"
        assert results[-1].found
        assert results[-1].provider is None


class TestMtaStsProbe:
    """Test MTA-STS record lookup and conditional policy fetch."""

    POLICY_URL = "https://mta-sts.example.com/.well-known/mta-sts.txt"
    POLICY = "version: STSv1\nmode: enforce\nmx: mx1.example.com\nmx: *.example.net\nmax_age: 604800\n"

    def test_no_fetch_without_txt_record(self):
        fetcher = FakeFetcher()

        result = mta_sts.run("example.com", FakeResolver(), fetcher)

        assert result.status is ProbeStatus.ERROR
        assert result.policy is None
        assert fetcher.calls == []

    def test_policy_fetched_when_record_present(self):
        resolver = FakeResolver({("_mta-sts.example.com", "TXT"): ["v=STSv1; id=20240101"]})
        fetcher = FakeFetcher({self.POLICY_URL: (self.POLICY, 200, None)})

        result = mta_sts.run("example.com", resolver, fetcher)

        assert result.record.record == "v=STSv1; id=20240101"
        assert fetcher.calls == [self.POLICY_URL]
        assert result.policy.fetched
        assert result.policy.text == self.POLICY
        assert result.policy.fields["mode"] == "enforce"
        assert result.policy.fields["mx"] == ("mx1.example.com", "*.example.net")
        assert result.policy.fields["max_age"] == 604800

    def test_fetch_failure_reported_in_policy(self):
        resolver = FakeResolver({("_mta-sts.example.com", "TXT"): ["v=STSv1; id=1"]})
        fetcher = FakeFetcher({self.POLICY_URL: (None, 404, "HTTP 404 Not Found")})

        result = mta_sts.run("example.com", resolver, fetcher)

        assert result.status is ProbeStatus.FOUND
        assert not result.policy.fetched
        assert result.policy.status_code == 404
        assert result.policy.error.kind is ErrorKind.HTTP_FETCH_FAILURE

    def test_parse_policy_skips_malformed_lines(self):
        fields = mta_sts.parse_policy("version: STSv1\ngarbage line\nmode:testing\nmax_age: soon")

        assert fields == {"version": "STSv1", "mode": "testing", "max_age": "soon"}


class TestTlsRptAndBimi:
    """Test TLS-RPT and BIMI lookups."""

    def test_tls_rpt_name(self):
        resolver = FakeResolver({("_smtp._tls.example.com", "TXT"): ["v=TLSRPTv1; rua=mailto:t@example.com"]})

        result = tls_rpt.run("example.com", resolver)

        assert result.kind is RecordKind.TLS_RPT
        assert result.record == "v=TLSRPTv1; rua=mailto:t@example.com"

    def test_tls_rpt_missing_is_error(self):
        assert tls_rpt.run("example.com", FakeResolver()).status is ProbeStatus.ERROR

    def test_bimi_default_selector(self):
        resolver = FakeResolver({("default._bimi.example.com", "TXT"): ["v=BIMI1; l=https://example.com/logo.svg"]})

        result = bimi.run("example.com", resolver)

        assert result.name == "default._bimi.example.com"
        assert result.found

    def test_bimi_custom_selector(self):
        resolver = FakeResolver()

        result = bimi.run("example.com", resolver, selector="brand")

        assert resolver.calls == [("brand._bimi.example.com", "TXT")]
        assert result.status is ProbeStatus.ERROR
