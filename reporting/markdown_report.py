"""
Markdown report generation. Summary table (one row per domain) and per-domain details.
"""
import os
from datetime import datetime, timezone

from core.context import AuditContext
from core.models import DomainReport, ProbeStatus, TxtProbeResult
from dns_checks.dmarc import policy as dmarc_policy

_STATUS_TEXT = {
    ProbeStatus.FOUND: "Present",
    ProbeStatus.ABSENT: "Not found",
    ProbeStatus.ERROR: "Lookup failed",
}


def _escape_md(s: str) -> str:
    if not isinstance(s, str):
        s = str(s)
    return s.replace("|", "\\|").replace("\n", " ")


def _txt_cell(result: TxtProbeResult) -> str:
    if result.error is not None:
        return f"Lookup failed: {_escape_md(result.error.message)}"
    if not result.values:
        return "Not found"
    return "<br>".join(f"`{_escape_md(v)}`" for v in result.values)


def _summary_row(r: DomainReport) -> str:
    pol = dmarc_policy(r.dmarc)
    dmarc = _STATUS_TEXT[r.dmarc.status] + (f" (p={_escape_md(pol)})" if pol else "")
    selectors = ", ".join(r.dkim_selectors_found) or "none"
    mx = str(r.mx.count) if r.mx.error is None else "Lookup failed"
    cells = [
        f"`{_escape_md(r.domain)}`",
        mx,
        _STATUS_TEXT[r.spf.status],
        dmarc,
        _escape_md(selectors),
        _STATUS_TEXT[r.mta_sts.status],
        _STATUS_TEXT[r.tls_rpt.status],
        _STATUS_TEXT[r.bimi.status],
    ]
    return "| " + " | ".join(cells) + " |"


def _domain_section(r: DomainReport) -> list[str]:
    lines = [f"### {_escape_md(r.domain)}", "", "| Check | Result |", "|-------|--------|"]
    if r.mx.error is not None:
        mx = f"Lookup failed: {_escape_md(r.mx.error.message)}"
    elif r.mx.records:
        mx = "<br>".join(f"`{_escape_md(m.exchange)}` (pref {m.preference})" for m in r.mx.records)
    else:
        mx = "No MX records"
    lines.append(f"| MX ({r.mx.count}) | {mx} |")
    lines.append(f"| SPF | {_txt_cell(r.spf)} |")
    lines.append(f"| DMARC | {_txt_cell(r.dmarc)} |")
    if r.dkim.found:
        dkim = f"`{_escape_md(r.dkim.name)}` exists ({', '.join(r.dkim.record_types)})"
    else:
        dkim = f"Not confirmed: {_escape_md(r.dkim.error.message if r.dkim.error else 'no answer')}"
    lines.append(f"| DKIM namespace | {dkim} |")
    for sel in r.dkim_selectors:
        provider = f" ({_escape_md(sel.provider)})" if sel.provider else ""
        lines.append(f"| DKIM `{_escape_md(sel.selector)}`{provider} | {'Found' if sel.found else 'Not found'} |")
    lines.append(f"| MTA-STS | {_txt_cell(r.mta_sts.record)} |")
    policy = r.mta_sts.policy
    if policy is not None:
        if policy.fetched:
            mode = _escape_md(policy.fields.get("mode", "?"))
            mx_patterns = ", ".join(policy.fields.get("mx", [])) or "-"
            lines.append(f"| MTA-STS policy | mode `{mode}`, mx `{_escape_md(mx_patterns)}`, max_age {policy.fields.get('max_age', '-')} |")
        else:
            lines.append(f"| MTA-STS policy | Fetch failed: {_escape_md(policy.error.message)} |")
    lines.append(f"| TLS-RPT | {_txt_cell(r.tls_rpt)} |")
    lines.append(f"| BIMI | {_txt_cell(r.bimi)} |")
    lines.append("")
    return lines


def generate(ctx: AuditContext) -> str:
    """Generate Markdown report; return path to saved file. Uses ctx.output_dir if set. Filename includes UTC timestamp."""
    now = datetime.now(timezone.utc)
    scan_date = now.strftime("%Y-%m-%d %H:%M UTC")
    out_dir = os.path.abspath(ctx.output_dir) if ctx.output_dir else os.path.abspath("reports")
    os.makedirs(out_dir, exist_ok=True)
    out_path = os.path.join(out_dir, f"mailaudit_report_{now.strftime('%Y%m%d_%H%M%S')}.md")
    nameserver = ctx.resolver_config.server if ctx.resolver_config else "-"

    lines = [
        "# MailAudit - Email Authentication Report",
        "",
        f"**Scan date:** {scan_date}  |  **Domains:** {len(ctx.reports)}  |  **Nameserver:** `{_escape_md(nameserver)}`",
        "",
        "## Summary",
        "",
        "| Domain | MX | SPF | DMARC | DKIM selectors | MTA-STS | TLS-RPT | BIMI |",
        "|--------|----|-----|-------|----------------|---------|---------|------|",
    ]
    lines.extend(_summary_row(r) for r in ctx.reports)
    lines.append("")
    if ctx.skipped:
        lines.extend(["## Skipped input", ""])
        lines.extend(f"- `{_escape_md(s['domain'])}`: {_escape_md(s['reason'])}" for s in ctx.skipped)
        lines.append("")
    lines.extend(["## Details", ""])
    for r in ctx.reports:
        lines.extend(_domain_section(r))

    with open(out_path, "w", encoding="utf-8") as f:
        f.write("\n".join(lines))
    return out_path
