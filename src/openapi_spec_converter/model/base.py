"""Shared model base and the recursive Schema fragment.

All document models keep keywords they do not declare (``extra="allow"``),
so a conversion step only touches what it knows about and passes the rest
through unchanged. Keywords the input set to ``null`` are written back as
``null``; keywords cleared by a rule are left out.
"""

from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PrivateAttr,
    field_serializer,
    field_validator,
    model_serializer,
)
from pydantic.alias_generators import to_camel

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch")

Number = int | float

# Exclusivity indicator: the boolean form is OpenAPI 3.0's
# `exclusiveMinimum: true`, the numeric form is 3.1's `exclusiveMinimum: 10`.
ExclusiveBound = bool | int | float


class SpecModel(BaseModel):
    """Base for every document model: camelCase on the wire, extras kept."""

    model_config = ConfigDict(
        extra="allow",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    _explicit_nulls: set[str] = PrivateAttr(default_factory=set)

    def model_post_init(self, __context: Any) -> None:
        self._explicit_nulls = {
            name for name in self.model_fields_set if getattr(self, name, None) is None
        }
        self._explicit_nulls.update(
            key for key, value in (self.model_extra or {}).items() if value is None
        )

    def keep_null(self, name: str) -> None:
        """Write field ``name`` as ``null`` while it holds None."""
        self._explicit_nulls.add(name)

    @model_serializer(mode="wrap")
    def _write_explicit_nulls(self, handler, info):
        data = handler(self)
        fields = type(self).model_fields
        for name in self._explicit_nulls:
            if name in fields:
                if getattr(self, name) is None:
                    alias = fields[name].alias if info.by_alias else None
                    data.setdefault(alias or name, None)
            elif (self.model_extra or {}).get(name, ...) is None:
                data.setdefault(name, None)
        return data

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class Schema(SpecModel):
    """A schema fragment, as found under definitions, components and content."""

    ref: str | None = Field(None, alias="$ref")
    title: str | None = None
    description: str | None = None
    type: list[str] | None = None
    format: str | None = None
    nullable: bool | None = None

    minimum: Number | None = None
    exclusive_minimum: ExclusiveBound | None = None
    maximum: Number | None = None
    exclusive_maximum: ExclusiveBound | None = None

    example: Any = None
    examples: list[Any] | None = None

    content_media_type: str | None = None
    content_encoding: str | None = None

    read_only: bool | None = None
    required: list[str] | None = None
    properties: dict[str, "Schema | bool"] | None = None
    items: "Schema | bool | None" = None
    additional_properties: "Schema | bool | None" = None

    all_of: list["Schema | bool"] | None = None
    one_of: list["Schema | bool"] | None = None
    any_of: list["Schema | bool"] | None = None

    @field_validator("type", mode="before")
    @classmethod
    def _type_as_list(cls, value):
        if isinstance(value, str):
            return [value]
        return value

    @field_serializer("type")
    def _type_as_scalar(self, value: list[str] | None):
        # A single type is written as a plain string in every dialect.
        if value is not None and len(value) == 1:
            return value[0]
        return value

    @property
    def is_string(self) -> bool:
        """True when the sole declared type is ``string``."""
        return self.type == ["string"]
