"""
JSON report generation. One entry per audited domain plus run metadata, for CI/automation.
"""
import json
import os
from datetime import datetime, timezone

from core.context import AuditContext


def build_payload(ctx: AuditContext, scan_date: str) -> dict:
    cfg = ctx.resolver_config
    return {
        "tool": "MailAudit",
        "scan_date": scan_date,
        "nameserver": {
            "server": cfg.server,
            "requested": cfg.requested,
            "verified": cfg.verified,
            "fell_back": cfg.fell_back,
            "warning": cfg.warning,
        } if cfg else None,
        "options": {
            "dkim_selector": ctx.dkim_selector,
            "bimi_selector": ctx.bimi_selector,
        },
        "summary": ctx.summary(),
        "skipped": ctx.skipped,
        "step_errors": ctx.step_errors,
        "reports": [r.to_dict() for r in ctx.reports],
    }


def _output_dir(ctx: AuditContext) -> str:
    if ctx.output_dir:
        return os.path.abspath(ctx.output_dir)
    return os.path.abspath("reports")


def generate(ctx: AuditContext) -> str:
    """Generate JSON report; return path to saved file. Uses ctx.output_dir if set. Filename includes UTC timestamp."""
    now = datetime.now(timezone.utc)
    out_dir = _output_dir(ctx)
    os.makedirs(out_dir, exist_ok=True)
    out_path = os.path.join(out_dir, f"mailaudit_report_{now.strftime('%Y%m%d_%H%M%S')}.json")
    payload = build_payload(ctx, now.strftime("%Y-%m-%dT%H:%M:%SZ"))
    with open(out_path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, ensure_ascii=False)
    return out_path
