"""
Pre-flight check: dnspython must be importable and new enough for Resolver.resolve().
If not, print what is missing and exit with non-zero.
"""
import sys

MIN_DNSPYTHON = (2, 0)


def check_dnspython() -> tuple[bool, str]:
    """Return (ok, message)."""
    try:
        import dns.version
    except ImportError:
        return False, "dnspython not installed (pip install dnspython)"
    found = (dns.version.MAJOR, dns.version.MINOR)
    if found < MIN_DNSPYTHON:
        want = ".".join(str(p) for p in MIN_DNSPYTHON)
        return False, f"dnspython {dns.version.version} too old, need >= {want} (pip install -U dnspython)"
    return True, f"dnspython {dns.version.version}"


def check_requirements() -> None:
    """Exit with 1 if a required package is missing or outdated."""
    ok, msg = check_dnspython()
    if ok:
        return
    print("MailAudit - Missing required package. Please install before running.\n", file=sys.stderr)
    print(f"  [X] DNS resolution: {msg}", file=sys.stderr)
    print("\nAfter installing, run MailAudit again.", file=sys.stderr)
    sys.exit(1)
