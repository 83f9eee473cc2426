"""
Phone Name Lookup - Pydantic Data Schemas

Core data models for a single reverse lookup run: the request, the
transient extraction candidate and the one structured result that is
written to stdout.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Provenance(str, Enum):
    """Which kind of page content produced a candidate."""
    PARTIAL = "partial"
    WEB = "web"


class NameSource(str, Enum):
    """Source tag reported for a resolved name."""
    TRUECALLER_PARTIAL = "truecaller_partial"
    TRUECALLER_WEB = "truecaller_web"

    @classmethod
    def from_provenance(cls, provenance: Provenance) -> "NameSource":
        if provenance == Provenance.PARTIAL:
            return cls.TRUECALLER_PARTIAL
        return cls.TRUECALLER_WEB


class LookupRequest(BaseModel):
    """Phone number plus region code; immutable for the run."""
    model_config = ConfigDict(frozen=True)

    phone_number: str = Field(
        ...,
        description="Opaque identifier passed to the provider (phone number)"
    )

    region_code: str = Field(
        default="ke",
        description="Provider region code used in the lookup URL"
    )

    @field_validator('phone_number', 'region_code')
    @classmethod
    def validate_non_empty(cls, v):
        """Ensure identifier fields are not empty."""
        if not v or not v.strip():
            raise ValueError('Field cannot be empty')
        return v.strip()


class ExtractionCandidate(BaseModel):
    """Raw text value with provenance; never stored beyond one extraction."""
    model_config = ConfigDict(frozen=True)

    value: str
    provenance: Provenance
    strategy: str = Field(..., description="Name of the strategy that produced the value")
    locator: str = Field(..., description="Pattern label or CSS selector that matched")


class LookupResult(BaseModel):
    """
    Tagged outcome of a run.

    Success carries ``name`` and ``source``; failure carries ``error`` and
    optionally ``debug`` (path to a saved screenshot). Serialised without
    null fields.
    """
    success: bool
    name: Optional[str] = None
    source: Optional[NameSource] = None
    error: Optional[str] = None
    debug: Optional[str] = None

    def model_post_init(self, __context) -> None:
        """Reject results that mix or miss the fields of their branch."""
        if self.success:
            if not self.name or self.source is None:
                raise ValueError('Successful result requires name and source')
            if self.error is not None or self.debug is not None:
                raise ValueError('Successful result cannot carry error or debug')
        else:
            if not self.error:
                raise ValueError('Failed result requires an error message')
            if self.name is not None or self.source is not None:
                raise ValueError('Failed result cannot carry name or source')

    @classmethod
    def from_candidate(cls, candidate: ExtractionCandidate) -> 'LookupResult':
        """Build a success result from a validated candidate."""
        return cls(
            success=True,
            name=candidate.value,
            source=NameSource.from_provenance(candidate.provenance),
        )

    @classmethod
    def failed(cls, error: str, debug: Optional[str] = None) -> 'LookupResult':
        return cls(success=False, error=error, debug=debug)

    def to_json(self) -> str:
        return self.model_dump_json(exclude_none=True)
