#!/usr/bin/env python3
"""
MailAudit - Email Authentication Audit
Snapshot of a domain's anti-spoofing records: MX, SPF, DMARC, DKIM, MTA-STS, TLS-RPT, BIMI.

Usage:
  mailaudit.py example.com example.org
  mailaudit.py --file domains.csv --column DomainName --format all
"""
import argparse
import os
import sys

# Ensure project root is on path when run as script
_PROJECT_ROOT = os.path.dirname(os.path.abspath(__file__))
if _PROJECT_ROOT not in sys.path:
    sys.path.insert(0, _PROJECT_ROOT)

from core.config import load_env_config, load_file_config, merge_config
from core.constants import DEFAULT_NAMESERVER, OUTPUT_FORMATS
from core.context import AuditContext
from core.domain_source import load_domains_from_file
from core.requirements_check import check_requirements

# Exit codes: 0 = success, 1 = validation/input error, 2 = report writing failed
EXIT_SUCCESS = 0
EXIT_VALIDATION = 1
EXIT_REPORT_FAILURE = 2


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="MailAudit",
        description="Email authentication audit - queries MX, SPF, DMARC, DKIM, MTA-STS, TLS-RPT and BIMI records for one or more domains.",
    )
    parser.add_argument("domains", nargs="*", metavar="DOMAIN", help="Domain(s) to audit (e.g. example.com)")
    parser.add_argument("--file", "-f", metavar="PATH", help="Batch file: CSV with a domain column, or one domain per line")
    parser.add_argument("--column", metavar="NAME", help="CSV column holding the domain (default: DomainName, then Domain)")
    parser.add_argument("--nameserver", "-n", metavar="ADDR", help=f"DNS server to query (default: {DEFAULT_NAMESERVER})")
    parser.add_argument("--dkim-selector", metavar="LABEL", help="Extra DKIM selector to check besides selector1, selector2, k1")
    parser.add_argument("--bimi-selector", metavar="LABEL", help="BIMI selector (default: default)")
    parser.add_argument("--format", choices=OUTPUT_FORMATS, default=None, help="Output: text (console, default), json, markdown, all")
    parser.add_argument("--output-dir", "-o", metavar="DIR", help="Output directory for report files (default: reports/)")
    parser.add_argument("--dns-timeout", type=float, metavar="SEC", help="DNS query timeout in seconds")
    parser.add_argument("--http-timeout", type=float, metavar="SEC", help="MTA-STS policy fetch timeout in seconds")
    parser.add_argument("--config", metavar="FILE", help="Path to JSON config file (overridden by CLI)")
    parser.add_argument("--log-file", metavar="FILE", help="Append logs to file")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose (debug) logging")
    parser.add_argument("--quiet", "-q", action="store_true", help="Minimal progress output")
    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    return _build_parser().parse_args(argv)


def collect_domains(args: argparse.Namespace) -> list[str]:
    """CLI domains first, then batch-file rows. Exits with EXIT_VALIDATION if none or the file is unreadable."""
    domains = [d for d in args.domains if d.strip()]
    if args.file:
        try:
            domains.extend(load_domains_from_file(args.file, args.column))
        except (OSError, ValueError) as e:
            print(f"MailAudit: cannot read batch file: {e}", file=sys.stderr)
            sys.exit(EXIT_VALIDATION)
    if not domains:
        print("MailAudit: no domains supplied. Pass DOMAIN arguments or --file PATH. Example: mailaudit.py example.com", file=sys.stderr)
        sys.exit(EXIT_VALIDATION)
    return domains


def build_context(args: argparse.Namespace, domains: list[str]) -> AuditContext:
    env_cfg = load_env_config()
    file_cfg = load_file_config(args.config or "")
    cli_cfg = {
        "verbose": args.verbose if args.verbose else None,
        "quiet": args.quiet if args.quiet else None,
        "nameserver": (args.nameserver or "").strip() or None,
        "dkim_selector": (args.dkim_selector or "").strip() or None,
        "bimi_selector": (args.bimi_selector or "").strip() or None,
        "output_dir": (args.output_dir or "").strip() or None,
        "output_format": args.format,
        "log_file": (args.log_file or "").strip() or None,
        "dns_timeout": args.dns_timeout,
        "http_timeout": args.http_timeout,
    }
    merged = merge_config(env_cfg, file_cfg, cli_cfg)
    return AuditContext(
        domains=domains,
        nameserver=merged.get("nameserver"),
        dkim_selector=merged.get("dkim_selector"),
        bimi_selector=merged.get("bimi_selector"),
        verbose=merged.get("verbose", False),
        quiet=merged.get("quiet", False),
        log_file=merged.get("log_file"),
        output_dir=merged.get("output_dir"),
        output_format=merged.get("output_format") or "text",
        dns_timeout=merged.get("dns_timeout"),
        http_timeout=merged.get("http_timeout"),
    )


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    check_requirements()
    from core.scanner import main_scan

    domains = collect_domains(args)
    ctx = build_context(args, domains)
    main_scan(ctx)
    if not ctx.reports:
        print("MailAudit: no valid domains to audit.", file=sys.stderr)
        sys.exit(EXIT_VALIDATION)
    if ctx.step_errors:
        sys.exit(EXIT_REPORT_FAILURE)
    sys.exit(EXIT_SUCCESS)


if __name__ == "__main__":
    main()
