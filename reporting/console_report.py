"""
Plain-text rendering of one DomainReport for the terminal.
"""
from core.models import DomainReport, ProbeStatus, TxtProbeResult
from dns_checks.dmarc import policy as dmarc_policy

_MARK = {
    ProbeStatus.FOUND: "[+]",
    ProbeStatus.ABSENT: "[-]",
    ProbeStatus.ERROR: "[!]",
}
_WIDTH = 10


def _line(label: str, status: ProbeStatus, text: str) -> str:
    return f"  {_MARK[status]} {label:<{_WIDTH}} {text}"


def _txt_text(result: TxtProbeResult) -> str:
    if result.error is not None:
        return f"lookup failed: {result.error.message}"
    if not result.values:
        return "not found"
    return " | ".join(result.values)


def render(report: DomainReport) -> str:
    lines = [f"\n== {report.domain}"]

    mx = report.mx
    if mx.error is not None:
        lines.append(_line("MX", mx.status, f"lookup failed: {mx.error.message}"))
    elif not mx.records:
        lines.append(_line("MX", mx.status, "no MX records"))
    else:
        hosts = ", ".join(f"{r.exchange} ({r.preference})" for r in mx.records)
        lines.append(_line("MX", mx.status, f"{mx.count} record(s): {hosts}"))

    lines.append(_line("SPF", report.spf.status, _txt_text(report.spf)))
    if len(report.spf.values) > 1:
        lines.append(f"      {'':<{_WIDTH}} note: {len(report.spf.values)} SPF records published")

    dmarc_text = _txt_text(report.dmarc)
    pol = dmarc_policy(report.dmarc)
    if pol:
        dmarc_text += f"  (p={pol})"
    lines.append(_line("DMARC", report.dmarc.status, dmarc_text))

    dkim = report.dkim
    if dkim.found:
        dkim_text = f"{dkim.name} exists ({', '.join(dkim.record_types)}), may contain selectors"
    else:
        dkim_text = f"{dkim.name}: {dkim.error.message if dkim.error else 'no answer'}"
    lines.append(_line("DKIM", dkim.status, dkim_text))
    for sel in report.dkim_selectors:
        provider = f" [{sel.provider}]" if sel.provider else ""
        state = "found" if sel.found else "not found"
        lines.append(f"      {'':<{_WIDTH}} {'+' if sel.found else '-'} {sel.selector}{provider}: {state}")

    sts = report.mta_sts
    lines.append(_line("MTA-STS", sts.status, _txt_text(sts.record)))
    if sts.policy is not None:
        if sts.policy.fetched:
            mode = sts.policy.fields.get("mode", "?")
            lines.append(f"      {'':<{_WIDTH}} policy: mode={mode} ({sts.policy.url})")
        else:
            lines.append(f"      {'':<{_WIDTH}} policy fetch failed: {sts.policy.error.message}")

    lines.append(_line("TLS-RPT", report.tls_rpt.status, _txt_text(report.tls_rpt)))
    lines.append(_line("BIMI", report.bimi.status, _txt_text(report.bimi)))
    return "\n".join(lines)
