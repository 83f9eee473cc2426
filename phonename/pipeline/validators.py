from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field


class NameRule(BaseModel):
    """Predicate over a candidate name.

    Accepts a value when its trimmed length lies strictly between
    ``min_length`` and ``max_length`` and it contains none of ``reject``.
    Rejection only means "try the next candidate".
    """

    min_length: int = 2
    max_length: int = 100
    reject: List[str] = Field(default_factory=list)
    ignore_case: bool = False

    def accepts(self, value: str | None) -> bool:
        if value is None:
            return False
        s = value.strip()
        if not s:
            return False
        if not (self.min_length < len(s) < self.max_length):
            return False
        hay = s.lower() if self.ignore_case else s
        for token in self.reject:
            needle = token.lower() if self.ignore_case else token
            if needle in hay:
                return False
        return True


# Placeholder shown by the provider when a partial profile has no owner
PARTIAL_RULE = NameRule(reject=["Unknown"])

# Page chrome (title, nav links, buttons) that selector extraction can hit
WEB_RULE = NameRule(
    reject=["truecaller", "search", "lookup", "reverse", "phone"],
    ignore_case=True,
)


def is_valid_partial_name(value: str | None) -> bool:
    return PARTIAL_RULE.accepts(value)


def is_valid_web_name(value: str | None) -> bool:
    return WEB_RULE.accepts(value)
