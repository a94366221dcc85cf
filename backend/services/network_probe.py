"""
Network probes used by URL analysis: DNS records and single-hop redirects.

Both probes return tagged results and never raise.
"""

import asyncio
from dataclasses import dataclass, field
from typing import List, Optional

import dns.asyncresolver
import requests

REDIRECT_TIMEOUT = 5.0
SCANNER_USER_AGENT = "ThreatLens Security Scanner/1.0"


@dataclass
class DnsRecords:
    """A and MX records for a hostname; empty lists mean none or failed."""

    a_records: List[str] = field(default_factory=list)
    mx_records: List[str] = field(default_factory=list)
    error: Optional[str] = None


@dataclass
class RedirectProbe:
    """Result of one HEAD request with redirects disabled."""

    redirects_to: Optional[str] = None
    status_code: Optional[int] = None
    error: Optional[str] = None


async def _resolve_a(hostname: str) -> List[str]:
    answer = await dns.asyncresolver.resolve(hostname, "A")
    return [record.address for record in answer]


async def _resolve_mx(hostname: str) -> List[str]:
    answer = await dns.asyncresolver.resolve(hostname, "MX")
    return [record.exchange.to_text(omit_final_dot=True) for record in answer]


async def lookup_dns(hostname: str) -> DnsRecords:
    """
    Resolve A and MX records concurrently.

    Each record type succeeds or fails on its own; a failed branch yields
    an empty list without discarding the other branch's result.
    """
    try:
        a_result, mx_result = await asyncio.gather(
            _resolve_a(hostname), _resolve_mx(hostname), return_exceptions=True
        )
    except Exception as e:
        print(f"[network_probe] ERROR: DNS lookup failed for {hostname}: {e}")
        return DnsRecords(error="DNS lookup failed")

    if isinstance(a_result, BaseException):
        print(f"[network_probe] No A records for {hostname}: {a_result!r}")
        a_result = []
    if isinstance(mx_result, BaseException):
        print(f"[network_probe] No MX records for {hostname}: {mx_result!r}")
        mx_result = []

    return DnsRecords(a_records=a_result, mx_records=mx_result)


def _head_request(session: requests.Session, url: str, timeout: float) -> requests.Response:
    return session.head(
        url,
        allow_redirects=False,
        timeout=timeout,
        headers={"User-Agent": SCANNER_USER_AGENT},
    )


async def probe_redirect(url: str, timeout: float = REDIRECT_TIMEOUT) -> RedirectProbe:
    """
    Issue a HEAD request and report where a 3xx response points.

    The request runs in a worker thread that asyncio cannot interrupt, so
    the same timeout is handed to requests as its connect/read timeout and
    the probe's session is closed when the wait is abandoned. A stalled
    worker therefore gives up on its own within one more timeout period.

    Args:
        url: Absolute URL to probe
        timeout: Seconds before the request is cancelled

    Returns:
        RedirectProbe with destination, status or an error note
    """
    session = requests.Session()
    try:
        response = await asyncio.wait_for(
            asyncio.to_thread(_head_request, session, url, timeout), timeout=timeout
        )
    except asyncio.TimeoutError:
        print(f"[network_probe] TIMEOUT: Redirect probe timed out for {url}")
        return RedirectProbe(error=f"Could not follow URL: timed out after {timeout:g}s")
    except requests.RequestException as e:
        print(f"[network_probe] ERROR: Redirect probe failed for {url}: {e}")
        return RedirectProbe(error=f"Could not follow URL: {e}")
    finally:
        session.close()

    if 300 <= response.status_code < 400:
        return RedirectProbe(
            redirects_to=response.headers.get("Location"),
            status_code=response.status_code,
        )
    return RedirectProbe(status_code=response.status_code)
