from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence


# Raw-markup markers of an authentication wall (case-sensitive)
LOGIN_GATE_MARKERS = [
    "Log in",
    "Sign in",
    "login-button",
]


@dataclass(frozen=True)
class GateDecision:
    gated: bool
    markers: List[str]


def detect_login_gate(html: str | None, markers: Sequence[str] = LOGIN_GATE_MARKERS) -> GateDecision:
    """Heuristic: any marker present as a substring of the raw markup.

    False negatives fall through to selector extraction; false positives
    only add one partial-text attempt.
    """
    if not html:
        return GateDecision(gated=False, markers=[])
    found = [m for m in markers if m in html]
    return GateDecision(gated=len(found) > 0, markers=found)
