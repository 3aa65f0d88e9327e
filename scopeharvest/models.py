"""Response models for the HackerOne hacker API.

Only the attributes the harvester reads are modeled; every other field in
the JSON:API payload is ignored. Modeled attributes are strict: a flag sent
as `"yes"` or `1` is a decode error, never coerced to a boolean.
"""

from typing import Generic, TypeVar

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictStr,
    field_validator,
)


T = TypeVar("T")


class Program(BaseModel):
    """A bug bounty program as listed on a programs page."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    handle: StrictStr = ""
    offers_bounties: StrictBool = False


class ScopeEntry(BaseModel):
    """A structured scope entry of a program."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    eligible_for_bounty: StrictBool = False
    asset_identifier: StrictStr = ""


class Record(BaseModel, Generic[T]):
    """A JSON:API resource object; only ``attributes`` is kept."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    attributes: T


class Page(BaseModel, Generic[T]):
    """One page of a listing endpoint."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    data: list[Record[T]] = Field(default_factory=list)

    @field_validator("data", mode="before")
    @classmethod
    def null_as_empty(cls, v: object) -> object:
        """Treat ``"data": null`` as an empty page."""
        return [] if v is None else v

    @property
    def items(self) -> list[T]:
        """Get the attribute objects in page order."""
        return [record.attributes for record in self.data]

    def __len__(self) -> int:
        return len(self.data)


ProgramsPage = Page[Program]
ScopePage = Page[ScopeEntry]
