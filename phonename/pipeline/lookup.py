from __future__ import annotations

from pathlib import Path
from typing import Optional
import sys
import time

from playwright.sync_api import Page

from ..config import LookupSettings
from ..ops_logger import LookupTrace, OpsLogger
from ..schemas import LookupRequest, LookupResult
from .extractors import NameExtractor
from .fetchers.playwright import BrowserSession
from .gate import detect_login_gate
from .navigation import NavigationController
from .snapshot import PageSnapshot


NOT_FOUND_ERROR = "Name not found - TrueCaller may require login"


class LookupPipeline:
    """Navigation, login-gate detection, name extraction and result contract.

    ``lookup`` always returns exactly one LookupResult: faults raised while
    the browser session is open are converted into failure results, and the
    session is released on every exit path.
    """

    def __init__(
        self,
        *,
        settings: Optional[LookupSettings] = None,
        session: Optional[BrowserSession] = None,
        navigator: Optional[NavigationController] = None,
        extractor: Optional[NameExtractor] = None,
        ops_logger: Optional[OpsLogger] = None,
        verbose: bool = False,
    ):
        self.settings = settings or LookupSettings()
        self.session = session or BrowserSession.from_settings(self.settings.browser)
        self.navigator = navigator or NavigationController(
            base_url=self.settings.provider.base_url,
            timeout_ms=self.settings.timeouts.navigation_ms,
            settle_ms=self.settings.timeouts.settle_ms,
        )
        self.extractor = extractor or NameExtractor.from_settings(self.settings.extraction)
        self.ops_logger = ops_logger
        self.verbose = bool(verbose)

    def _log(self, message: str) -> None:
        if self.verbose:
            print(message, file=sys.stderr)

    def lookup(self, request: LookupRequest) -> LookupResult:
        """Resolve a phone number to a name through a live browser session."""
        t0 = time.perf_counter()
        trace = LookupTrace(mode="playwright")
        try:
            trace.url = self.navigator.url_for(request)
            with self.session.page() as page:
                t_nav = time.perf_counter()
                snapshot = self.navigator.open(page, request)
                trace.navigate_s = time.perf_counter() - t_nav
                trace.status_code = snapshot.status_code
                self._log(f"Loaded {trace.url} (status={trace.status_code})")

                result = self._extract(snapshot, trace)
                if result is None:
                    result = LookupResult.failed(NOT_FOUND_ERROR, debug=self._capture_debug(page))
        except Exception as e:
            self._log(f"Lookup failed: {e.__class__.__name__}: {e}")
            result = LookupResult.failed(str(e).strip() or e.__class__.__name__)
        self._emit_ops_log(request, trace, result, time.perf_counter() - t0)
        return result

    def lookup_snapshot(self, snapshot: PageSnapshot, request: Optional[LookupRequest] = None) -> LookupResult:
        """Run gate detection and extraction against an already captured page."""
        t0 = time.perf_counter()
        trace = LookupTrace(mode="static", status_code=snapshot.status_code)
        try:
            result = self._extract(snapshot, trace)
            if result is None:
                result = LookupResult.failed(NOT_FOUND_ERROR)
        except Exception as e:
            self._log(f"Lookup failed: {e.__class__.__name__}: {e}")
            result = LookupResult.failed(str(e).strip() or e.__class__.__name__)
        self._emit_ops_log(request, trace, result, time.perf_counter() - t0)
        return result

    def _extract(self, snapshot: PageSnapshot, trace: LookupTrace) -> Optional[LookupResult]:
        t_extract = time.perf_counter()
        extracting = False
        try:
            gate = detect_login_gate(snapshot.html(), self.settings.extraction.gate_markers)
            trace.gate = gate
            if gate.gated:
                self._log(f"Login gate detected: {', '.join(gate.markers)}")
            extracting = True
            candidate = self.extractor.extract(snapshot, gated=gate.gated)
        finally:
            trace.extract_s = time.perf_counter() - t_extract
            if extracting:
                # Only strategies run by this call; others keep state from earlier runs
                trace.strategies = list(self.extractor.attempted)
                for strategy in self.extractor.strategies:
                    if strategy.name in trace.strategies:
                        trace.skipped_locators.extend(getattr(strategy, "skipped", []))
        if candidate is None:
            return None
        trace.candidate = candidate
        self._log(f"Name found via {candidate.strategy} ({candidate.locator})")
        return LookupResult.from_candidate(candidate)

    def _capture_debug(self, page: Page) -> Optional[str]:
        """Full-page screenshot for a failed run; None if it cannot be saved."""
        path = Path(self.settings.debug.screenshot_path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            page.screenshot(path=str(path), full_page=True)
        except Exception as e:
            self._log(f"Debug screenshot failed: {e}")
            return None
        return str(path)

    def _emit_ops_log(
        self,
        request: Optional[LookupRequest],
        trace: LookupTrace,
        result: LookupResult,
        total_s: float,
    ) -> None:
        if self.ops_logger is not None:
            self.ops_logger.log_run(request, trace, result, total_s)
