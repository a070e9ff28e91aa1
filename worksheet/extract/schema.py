from __future__ import annotations

from typing import Any, Iterable, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

PERSONAL_VALUE_ITEMS = 3
IMPACT_ITEMS = 3
ACTION_ITEMS = 5

Triple = Tuple[str, str, str]
Quintuple = Tuple[str, str, str, str, str]


def fixed_length(values: Any, size: int) -> Tuple[str, ...]:
    """
    Pad with "" or truncate to exactly `size` trimmed strings.
    None entries become "".
    """
    if values is None:
        values = ()
    if isinstance(values, str):
        values = (values,)
    out = [("" if v is None else str(v).strip()) for v in list(values)[:size]]
    out.extend([""] * (size - len(out)))
    return tuple(out)


def join_lines(lines: Iterable[str]) -> str:
    return "\n".join(ln.strip() for ln in lines if ln and ln.strip())


class _Group(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        str_strip_whitespace=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class PersonalValues(_Group):
    proud_of: Triple = Field(default=("", "", ""))
    achievement: Triple = Field(default=("", "", ""))
    happiness: Triple = Field(default=("", "", ""))
    inspiration: Triple = Field(default=("", "", ""))

    @field_validator("proud_of", "achievement", "happiness", "inspiration", mode="before")
    @classmethod
    def _three(cls, v):
        return fixed_length(v, PERSONAL_VALUE_ITEMS)


class ProductivityConnection(_Group):
    core_values: str = ""
    value_impact: str = ""


class Goals(_Group):
    description: str = ""
    impact: Triple = Field(default=("", "", ""))

    @field_validator("impact", mode="before")
    @classmethod
    def _three(cls, v):
        return fixed_length(v, IMPACT_ITEMS)


class WorkshopOutput(_Group):
    actions: Quintuple = Field(default=("", "", "", "", ""))
    reflections: str = ""

    @field_validator("actions", mode="before")
    @classmethod
    def _five(cls, v):
        return fixed_length(v, ACTION_ITEMS)


class ExtractedContent(_Group):
    """
    Worksheet fields recovered from an uploaded document.

    Every field is "extracted, please verify": missing content is an empty
    string, never None or a shorter list. The record is frozen and its
    lists are tuples; ``to_dict()`` gives a plain copy with real lists.
    """

    personal_values: PersonalValues = Field(default_factory=PersonalValues)
    productivity_connection: ProductivityConnection = Field(
        default_factory=ProductivityConnection
    )
    goals: Goals = Field(default_factory=Goals)
    workshop_output: WorkshopOutput = Field(default_factory=WorkshopOutput)

    @classmethod
    def empty(cls) -> "ExtractedContent":
        return cls()

    def is_empty(self) -> bool:
        return self == ExtractedContent.empty()

    def to_dict(self, *, by_alias: bool = False) -> dict:
        """JSON-ready nested dict (lists, not tuples)."""
        return self.model_dump(mode="json", by_alias=by_alias)


def export_json_schema() -> dict:
    """Export the JSON Schema of the extraction record (camelCase keys)."""
    return ExtractedContent.model_json_schema(by_alias=True)
