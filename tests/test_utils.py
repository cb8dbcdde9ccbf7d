"""Tests for domain validation and tag parsing."""

import pytest

from core.errors import InvalidDomainError
from core.utils import normalize_domain, parse_tag_list, validate_domain


class TestDomainValidation:
    """Test domain normalization and validation."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("Example.COM", "example.com"),
            ("  example.com.  ", "example.com"),
            ("mail.sub-domain.example.co.uk", "mail.sub-domain.example.co.uk"),
            ("xn--bcher-kva.example", "xn--bcher-kva.example"),
        ],
    )
    def test_valid(self, raw, expected):
        assert validate_domain(raw) == expected

    @pytest.mark.parametrize(
        "raw",
        ["", "   ", "localhost", "192.168.1.1", "::1", "exa mple.com", "-bad.example.com", "a..example.com", "a" * 64 + ".com"],
    )
    def test_invalid(self, raw):
        with pytest.raises(InvalidDomainError):
            validate_domain(raw)

    def test_too_long(self):
        name = ".".join(["a" * 60] * 5)
        with pytest.raises(InvalidDomainError, match="253"):
            validate_domain(name)

    def test_invalid_domain_is_value_error(self):
        with pytest.raises(ValueError):
            validate_domain("not valid")

    def test_normalize_none(self):
        assert normalize_domain(None) == ""


class TestTagList:
    """Test k=v; tag list parsing."""

    def test_parse_dmarc(self):
        tags = parse_tag_list("v=DMARC1; p=reject; rua=mailto:a@example.com; P=none")

        assert tags == {"v": "DMARC1", "p": "reject", "rua": "mailto:a@example.com"}

    def test_skips_junk(self):
        assert parse_tag_list(";; novalue ; =x; k = v ") == {"k": "v"}

    def test_empty(self):
        assert parse_tag_list("") == {}
