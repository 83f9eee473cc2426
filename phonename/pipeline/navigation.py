from __future__ import annotations

from urllib.parse import quote

from playwright.sync_api import Page

from ..schemas import LookupRequest
from .snapshot import PlaywrightSnapshot


DEFAULT_BASE_URL = "https://www.truecaller.com/search"


def build_lookup_url(request: LookupRequest, base_url: str = DEFAULT_BASE_URL) -> str:
    """``<provider-base>/<region-code>/<identifier>``"""
    base = base_url.rstrip("/")
    region = quote(request.region_code, safe="")
    ident = quote(request.phone_number, safe="+")
    return f"{base}/{region}/{ident}"


class NavigationController:
    """Single navigation attempt followed by a fixed settle delay.

    Waits for ``domcontentloaded`` rather than ``load`` so slow trackers and
    ads do not hold the run; the settle delay then lets client-side
    rendering populate the profile. Errors propagate to the caller.
    """

    def __init__(
        self,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout_ms: int = 30000,
        settle_ms: int = 5000,
    ) -> None:
        self.base_url = base_url
        self.timeout_ms = timeout_ms
        self.settle_ms = settle_ms

    def url_for(self, request: LookupRequest) -> str:
        return build_lookup_url(request, self.base_url)

    def open(self, page: Page, request: LookupRequest) -> PlaywrightSnapshot:
        url = self.url_for(request)
        response = page.goto(url, wait_until="domcontentloaded", timeout=self.timeout_ms)
        page.wait_for_timeout(self.settle_ms)
        status_code = response.status if response is not None else None
        return PlaywrightSnapshot(page, status_code=status_code)
