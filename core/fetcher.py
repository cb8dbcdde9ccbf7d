"""
HTTPS fetcher for the MTA-STS policy document. Plain GET, no custom headers.
Redirects are not followed (RFC 8461 section 3.3): a 3xx answer is a fetch error.
"""
import logging
import urllib.error
import urllib.request
from typing import Optional

from core import constants

logger = logging.getLogger("mailaudit.http")

# Policy documents are small; cap what is read
MAX_BODY_BYTES = 64 * 1024


class _NoRedirectHandler(urllib.request.HTTPRedirectHandler):
    """Refuse every redirect so the 3xx response surfaces as HTTPError."""

    def redirect_request(self, req, fp, code, msg, headers, newurl):
        logger.debug("Not following redirect %s -> %s", req.full_url, newurl)
        return None


class PolicyFetcher:
    """GET a URL and return (body, status_code, error). Never raises for network errors."""

    def __init__(self, timeout: Optional[float] = None):
        self.timeout = float(timeout) if timeout else constants.HTTP_TIMEOUT
        self._opener = urllib.request.build_opener(_NoRedirectHandler)

    def get(self, url: str) -> tuple[Optional[str], Optional[int], Optional[str]]:
        try:
            with self._opener.open(url, timeout=self.timeout) as resp:
                status = resp.status
                body = resp.read(MAX_BODY_BYTES).decode("utf-8", errors="replace")
        except urllib.error.HTTPError as e:
            location = e.headers.get("Location") if e.headers else None
            e.close()
            if location and 300 <= e.code < 400:
                return (None, e.code, f"HTTP {e.code} {e.reason} (redirect to {location} not followed)")
            return (None, e.code, f"HTTP {e.code} {e.reason}")
        except urllib.error.URLError as e:
            logger.debug("GET %s failed: %s", url, e.reason)
            return (None, None, f"Unreachable: {e.reason}")
        except (OSError, ValueError) as e:
            logger.debug("GET %s failed: %s", url, e)
            return (None, None, str(e) or e.__class__.__name__)
        if not 200 <= status < 300:
            return (None, status, f"HTTP {status}")
        return (body, status, None)
