"""
Audit orchestration: builds one DomainReport per domain by running every probe in a
fixed order, iterates the input domains sequentially, then writes reports.
Probes are fault-isolated: a failure in one becomes that field's error value and the
remaining probes, and the remaining domains, still run.
"""
import logging
from typing import Callable, Iterable, Iterator, Optional

from core.constants import DEFAULT_BIMI_SELECTOR, KNOWN_DKIM_SELECTORS
from core.context import AuditContext
from core.errors import InvalidDomainError
from core.fetcher import PolicyFetcher
from core.models import (
    DkimPresenceResult,
    DkimSelectorResult,
    DomainReport,
    MtaStsResult,
    MxProbeResult,
    RecordKind,
    TxtProbeResult,
    dns_error,
)
from core.progress import ProgressReporter
from core.resolver import ResolverClient, build_resolver_config
from core.utils import validate_domain
from dns_checks import bimi, dkim, dmarc, mta_sts, mx, spf, tls_rpt

logger = logging.getLogger("mailaudit")


def _run_probe(name: str, fn: Callable, fallback: Callable[[str], object]):
    """Run one probe; an unexpected exception is logged and turned into fallback(message)."""
    try:
        return fn()
    except Exception as e:
        logger.exception("Probe %s failed: %s", name, e)
        return fallback(f"{name} probe failed: {e}")


def _txt_fallback(kind: RecordKind, name: str) -> Callable[[str], TxtProbeResult]:
    return lambda msg: TxtProbeResult(kind, name, error=dns_error(msg))


def _selectors_fallback(domain: str, custom_selector: Optional[str]) -> Callable[[str], tuple]:
    def build(msg: str) -> tuple[DkimSelectorResult, ...]:
        labels = list(KNOWN_DKIM_SELECTORS)
        if custom_selector:
            labels.append((custom_selector.strip().lower(), None))
        return tuple(
            DkimSelectorResult(sel, f"{sel}._domainkey.{domain}", False, provider, msg)
            for sel, provider in labels
        )

    return build


def build_domain_report(
    domain: str,
    resolver,
    fetcher,
    dkim_selector: Optional[str] = None,
    bimi_selector: Optional[str] = None,
) -> DomainReport:
    """Run MX, SPF, DMARC, DKIM, MTA-STS, TLS-RPT, BIMI (in that order) for one domain."""
    mx_result = _run_probe(
        "MX", lambda: mx.run(domain, resolver),
        lambda msg: MxProbeResult(domain, error=dns_error(msg)),
    )
    spf_result = _run_probe(
        "SPF", lambda: spf.run(domain, resolver),
        _txt_fallback(RecordKind.SPF, domain),
    )
    dmarc_result = _run_probe(
        "DMARC", lambda: dmarc.run(domain, resolver),
        _txt_fallback(RecordKind.DMARC, f"_dmarc.{domain}"),
    )
    dkim_result = _run_probe(
        "DKIM", lambda: dkim.run_presence(domain, resolver),
        lambda msg: DkimPresenceResult(f"_domainkey.{domain}", error=dns_error(msg)),
    )
    selector_results = _run_probe(
        "DKIM selectors", lambda: dkim.run_selectors(domain, resolver, dkim_selector),
        _selectors_fallback(domain, dkim_selector),
    )
    mta_sts_result = _run_probe(
        "MTA-STS", lambda: mta_sts.run(domain, resolver, fetcher),
        lambda msg: MtaStsResult(_txt_fallback(RecordKind.MTA_STS, f"_mta-sts.{domain}")(msg)),
    )
    tls_rpt_result = _run_probe(
        "TLS-RPT", lambda: tls_rpt.run(domain, resolver),
        _txt_fallback(RecordKind.TLS_RPT, f"_smtp._tls.{domain}"),
    )
    bimi_name = f"{(bimi_selector or '').strip() or DEFAULT_BIMI_SELECTOR}._bimi.{domain}"
    bimi_result = _run_probe(
        "BIMI", lambda: bimi.run(domain, resolver, bimi_selector),
        _txt_fallback(RecordKind.BIMI, bimi_name),
    )
    return DomainReport(
        domain=domain,
        mx=mx_result,
        spf=spf_result,
        dmarc=dmarc_result,
        dkim=dkim_result,
        dkim_selectors=selector_results,
        mta_sts=mta_sts_result,
        tls_rpt=tls_rpt_result,
        bimi=bimi_result,
    )


def audit_domains(
    domains: Iterable[str],
    resolver,
    fetcher,
    dkim_selector: Optional[str] = None,
    bimi_selector: Optional[str] = None,
    on_skip: Optional[Callable[[str, str], None]] = None,
    on_domain: Optional[Callable[[str], None]] = None,
) -> Iterator[DomainReport]:
    """
    Yield one DomainReport per valid input domain, in input order, one domain at a time.
    Invalid inputs are logged, passed to on_skip(raw, reason) and skipped.
    on_domain(domain) is called before a domain is probed.
    """
    for raw in domains:
        try:
            domain = validate_domain(raw)
        except InvalidDomainError as e:
            logger.warning("Skipping input: %s", e)
            if on_skip:
                on_skip(raw, e.reason)
            continue
        if on_domain:
            on_domain(domain)
        yield build_domain_report(domain, resolver, fetcher, dkim_selector, bimi_selector)


def _report_detail(report: DomainReport) -> str:
    """One-line result after a domain, for verbose progress."""
    parts = [
        f"MX {report.mx.count}",
        f"SPF {report.spf.status.value}",
        f"DMARC {report.dmarc.status.value}",
        f"DKIM selectors {len(report.dkim_selectors_found)}",
        f"MTA-STS {report.mta_sts.status.value}",
        f"TLS-RPT {report.tls_rpt.status.value}",
        f"BIMI {report.bimi.status.value}",
    ]
    return ", ".join(parts)


def run_audit(ctx: AuditContext, resolver=None, fetcher=None) -> list[DomainReport]:
    """Resolve the nameserver config (unless a resolver is given), then audit every domain."""
    from reporting.console_report import render

    if resolver is None:
        ctx.resolver_config = build_resolver_config(ctx.nameserver, timeout=ctx.dns_timeout)
        resolver = ResolverClient(ctx.resolver_config, timeout=ctx.dns_timeout)
    else:
        ctx.resolver_config = getattr(resolver, "config", None)
    if fetcher is None:
        fetcher = PolicyFetcher(timeout=ctx.http_timeout)
    if ctx.resolver_config is not None:
        logger.info(
            "Nameserver: %s%s",
            ctx.resolver_config.server,
            "" if ctx.resolver_config.verified else " (unverified)",
        )

    progress = ProgressReporter(len(ctx.domains), verbose=ctx.verbose, quiet=ctx.quiet)
    ctx.progress = progress
    progress.start(list(ctx.domains))
    print_text = (ctx.output_format or "text") in ("text", "all")
    try:
        for report in audit_domains(
            ctx.domains,
            resolver,
            fetcher,
            dkim_selector=ctx.dkim_selector,
            bimi_selector=ctx.bimi_selector,
            on_skip=ctx.add_skipped,
            on_domain=progress.advance,
        ):
            ctx.add_report(report)
            progress.step_done(_report_detail(report))
            if print_text:
                print(render(report), flush=True)
    finally:
        progress.done()
        ctx.progress = None
    return ctx.reports


def run_reporting(ctx: AuditContext) -> None:
    """Write report file(s) per ctx.output_format (json, markdown, all). Text is printed during the audit."""
    from reporting.json_report import generate as generate_json
    from reporting.markdown_report import generate as generate_markdown

    fmt = (ctx.output_format or "text").lower()
    writers = []
    if fmt in ("json", "all"):
        writers.append(("Reporting: Generate JSON report", generate_json))
    if fmt in ("markdown", "all"):
        writers.append(("Reporting: Generate Markdown report", generate_markdown))
    for name, generate in writers:
        try:
            path = generate(ctx)
            logger.info("Report written: %s", path)
        except Exception as e:
            logger.exception("%s failed: %s", name, e)
            ctx.add_step_error(name, str(e))


def main_scan(ctx: AuditContext) -> None:
    """Entry point for an audit; handles logging, log file, and the final summary."""
    log_format = "%(name)s %(levelname)s %(message)s" if ctx.verbose else "%(message)s"
    log_level = logging.DEBUG if ctx.verbose else logging.INFO
    if ctx.quiet and not ctx.verbose:
        log_level = logging.WARNING
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if ctx.log_file:
        try:
            fh = logging.FileHandler(ctx.log_file, encoding="utf-8")
            fh.setFormatter(logging.Formatter(log_format))
            handlers.append(fh)
        except OSError as e:
            logger.warning("Could not open log file %s: %s", ctx.log_file, e)
    logging.basicConfig(level=log_level, format=log_format, handlers=handlers, force=True)

    logger.info("MailAudit - Email Authentication Audit | Domains: %d", len(ctx.domains))
    run_audit(ctx)
    if ctx.reports:
        run_reporting(ctx)

    summary = ctx.summary()
    logger.info(
        "Audit complete. Domains: %d, with lookup errors: %d, skipped: %d",
        summary["domains"], summary["domains_with_errors"], summary["skipped"],
    )
    for item in ctx.skipped:
        logger.warning("  skipped %r: %s", item["domain"], item["reason"])
    if ctx.step_errors:
        logger.warning("Step errors: %d", len(ctx.step_errors))
        for err in ctx.step_errors:
            logger.warning("  %s: %s", err.get("step"), err.get("error", ""))
