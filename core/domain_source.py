"""
Batch input: domain names from a CSV file (header row with a domain column) or a
plain list with one domain per line. Rows are returned as written; validation
happens per domain in the scanner so one bad row never stops the batch.
"""
import csv
import logging
import os

from core.constants import DEFAULT_DOMAIN_COLUMN, FALLBACK_DOMAIN_COLUMNS

logger = logging.getLogger("mailaudit.input")


def _pick_column(header: list[str], column: str | None) -> str | None:
    wanted = [column] if column else []
    wanted += [DEFAULT_DOMAIN_COLUMN, *FALLBACK_DOMAIN_COLUMNS]
    by_lower = {h.strip().lower(): h for h in header}
    for name in wanted:
        match = by_lower.get(name.strip().lower())
        if match is not None:
            return match
    return None


def _plain_lines(lines: list[str]) -> list[str]:
    out = []
    for line in lines:
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        # "example.com,..." in a header-less CSV: first field is the domain
        out.append(line.split(",", 1)[0].strip().strip('"'))
    return [d for d in out if d]


def load_domains_from_file(path: str, column: str | None = None) -> list[str]:
    """
    Return domain strings from path, in file order.
    CSV with a header: `column` (case-insensitive) or DomainName / Domain / Name,
    else the first column when the header has several fields. Otherwise one domain per line.
    Raises OSError if the file cannot be read; ValueError if `column` is given but missing.
    """
    if not os.path.isfile(path):
        raise OSError(f"Batch file not found: {path}")
    with open(path, encoding="utf-8-sig", newline="") as f:
        lines = f.read().splitlines()
    content = [ln for ln in lines if ln.strip() and not ln.lstrip().startswith("#")]
    if not content:
        return []

    header = next(csv.reader([content[0]]))
    picked = _pick_column(header, column)
    # No header row: first line already holds a domain
    if picked is None and column is None and (len(header) < 2 or "." in header[0]):
        return _plain_lines(content)

    if picked is None:
        if column:
            raise ValueError(f"Column {column!r} not found in {path} (columns: {', '.join(header)})")
        picked = header[0]
        logger.warning("No domain column in %s; using first column %r", path, picked)

    domains = []
    for row in csv.DictReader(content):
        value = (row.get(picked) or "").strip()
        if value:
            domains.append(value)
    logger.debug("Loaded %d domain(s) from %s (column %s)", len(domains), path, picked)
    return domains
