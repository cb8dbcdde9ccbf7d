"""
Shared constants for MailAudit: resolver defaults, record names, known DKIM selectors.
Use these instead of hardcoding server addresses, timeouts or label templates across modules.
"""
# Resolver used when the configured nameserver fails the reachability check
DEFAULT_NAMESERVER = "8.8.8.8"
# Known-good name queried (A record) to confirm a nameserver answers
CONTROL_DOMAIN = "example.com"

# DNS: one attempt per record, no retries
DNS_TIMEOUT = 5.0
DNS_PORT = 53

# HTTPS fetch of the MTA-STS policy document
HTTP_TIMEOUT = 10.0
MTA_STS_POLICY_URL = "https://mta-sts.{domain}/.well-known/mta-sts.txt"

# Record owner names
SPF_PREFIX = "v=spf1 "
DMARC_LABEL = "_dmarc"
DKIM_NAMESPACE_LABEL = "_domainkey"
MTA_STS_LABEL = "_mta-sts"
TLS_RPT_LABEL = "_smtp._tls"
BIMI_LABEL = "_bimi"
DEFAULT_BIMI_SELECTOR = "default"

# Well-known DKIM selectors (label -> provider). Heuristic only, not exhaustive.
KNOWN_DKIM_SELECTORS = (
    ("selector1", "Microsoft 365"),
    ("selector2", "Microsoft 365"),
    ("k1", "Mailchimp / Mandrill"),
)

# Batch files: column holding the domain name
DEFAULT_DOMAIN_COLUMN = "DomainName"
FALLBACK_DOMAIN_COLUMNS = ("Domain", "domain", "domainname", "Name")

# Output formats accepted by --format
OUTPUT_FORMATS = ("text", "json", "markdown", "all")
