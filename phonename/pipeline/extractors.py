"""
Name Extraction Logic - Ordered fallback chain over a rendered page

Two strategies share one capability, ``extract(snapshot)``, and are run in a
fixed order until one yields a validated candidate:

- PartialTextStrategy: "label: value" regexes over the plain body text,
  only attempted when a login wall was detected
- SelectorStrategy: ordered CSS locators over the DOM, always attempted

Works with both live Playwright pages and static selectolax snapshots.
"""

import re
from typing import List, Optional, Protocol, Sequence, Tuple

from ..config import ExtractionSettings, PartialPattern
from ..schemas import ExtractionCandidate, Provenance
from .snapshot import PageSnapshot
from .validators import NameRule, PARTIAL_RULE, WEB_RULE


class ExtractionStrategy(Protocol):
    name: str
    requires_gate: bool

    def extract(self, snapshot: PageSnapshot) -> Optional[ExtractionCandidate]: ...


class PartialTextStrategy:
    """
    Regex extraction over the page's rendered text.

    Login-walled profiles still expose fragments such as "Owner: Jane";
    each pattern is tried in order and the first valid capture wins.
    Patterns are never combined or cross-checked.
    """

    name = "partial_text"
    requires_gate = True

    def __init__(self, patterns: Sequence[PartialPattern], rule: NameRule = PARTIAL_RULE):
        self.rule = rule
        self.patterns: List[Tuple[str, re.Pattern[str]]] = [
            (p.label, re.compile(p.pattern, re.IGNORECASE)) for p in patterns
        ]

    def extract(self, snapshot: PageSnapshot) -> Optional[ExtractionCandidate]:
        text = snapshot.body_text() or ""
        for label, pattern in self.patterns:
            m = pattern.search(text)
            if not m:
                continue
            value = (m.group(1) if m.groups() else m.group(0)).strip()
            if self.rule.accepts(value):
                return ExtractionCandidate(
                    value=value,
                    provenance=Provenance.PARTIAL,
                    strategy=self.name,
                    locator=label,
                )
        return None


class SelectorStrategy:
    """
    DOM extraction over an ordered list of CSS locators.

    Scans locators in priority order and, within a locator, elements in
    document order. A locator whose query raises is skipped.
    """

    name = "selector"
    requires_gate = False

    def __init__(self, locators: Sequence[str], rule: NameRule = WEB_RULE):
        self.locators = list(locators)
        self.rule = rule
        self.skipped: List[str] = []

    def extract(self, snapshot: PageSnapshot) -> Optional[ExtractionCandidate]:
        self.skipped = []
        for selector in self.locators:
            try:
                texts = snapshot.query_texts(selector)
            except Exception:
                # Invalid at runtime; treat as no candidates
                self.skipped.append(selector)
                continue
            for raw in texts:
                value = (raw or "").strip()
                if self.rule.accepts(value):
                    return ExtractionCandidate(
                        value=value,
                        provenance=Provenance.WEB,
                        strategy=self.name,
                        locator=selector,
                    )
        return None


class NameExtractor:
    """Runs strategies in order; first validated candidate terminates the chain."""

    def __init__(self, strategies: Sequence[ExtractionStrategy]):
        self.strategies = list(strategies)
        # Names of strategies invoked by the last extract() call
        self.attempted: List[str] = []

    @classmethod
    def from_settings(cls, settings: ExtractionSettings) -> "NameExtractor":
        return cls([
            PartialTextStrategy(settings.partial_patterns, rule=settings.partial_rule),
            SelectorStrategy(settings.web_locators, rule=settings.web_rule),
        ])

    def extract(self, snapshot: PageSnapshot, *, gated: bool) -> Optional[ExtractionCandidate]:
        self.attempted = []
        for strategy in self.strategies:
            if strategy.requires_gate and not gated:
                continue
            self.attempted.append(strategy.name)
            candidate = strategy.extract(snapshot)
            if candidate is not None:
                return candidate
        return None
