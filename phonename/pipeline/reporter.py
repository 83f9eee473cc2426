from __future__ import annotations

import sys
from typing import Optional, TextIO

from ..schemas import LookupResult


class ResultReporter:
    """Writes the run's single LookupResult as one JSON line."""

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self.stream = stream if stream is not None else sys.stdout
        self.emitted: Optional[LookupResult] = None

    def emit(self, result: LookupResult) -> None:
        if self.emitted is not None:
            raise RuntimeError("a lookup result was already emitted for this run")
        self.emitted = result
        self.stream.write(result.to_json())
        self.stream.write("\n")
        self.stream.flush()
