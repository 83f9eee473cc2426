from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Optional, Sequence

from playwright.sync_api import sync_playwright, Page

from ...config import BrowserSettings


class BrowserSession:
    """Isolated headless browsing context with a fixed identity profile.

    Uses Playwright with security-first settings:
    - Chromium sandbox on by default (chromium_sandbox=True; disable only
      where Chromium runs as root, e.g. in containers)
    - Extensions and plugins disabled
    - One context and one page per session

    Use :meth:`page` as a context manager; the browser is closed exactly
    once on every exit path.
    """

    def __init__(
        self,
        *,
        user_agent: str,
        viewport: dict,
        headless: bool = True,
        chromium_sandbox: bool = True,
        launch_args: Optional[Sequence[str]] = None,
    ) -> None:
        self.user_agent = user_agent
        self.viewport = dict(viewport)
        self.headless = headless
        self.chromium_sandbox = chromium_sandbox
        self.launch_args = list(launch_args or [])

    @classmethod
    def from_settings(cls, settings: BrowserSettings) -> "BrowserSession":
        return cls(
            user_agent=settings.user_agent,
            viewport=settings.viewport.model_dump(),
            headless=settings.headless,
            chromium_sandbox=settings.chromium_sandbox,
            launch_args=settings.launch_args,
        )

    @contextmanager
    def page(self) -> Iterator[Page]:
        with sync_playwright() as p:
            browser = p.chromium.launch(
                headless=self.headless,
                args=self.launch_args,
                chromium_sandbox=self.chromium_sandbox,
            )
            try:
                context = browser.new_context(user_agent=self.user_agent, viewport=self.viewport)
                yield context.new_page()
            finally:
                browser.close()
