"""Brand profile data models.

The profile is a fixed schema of optional free-text fields rather than an
open string map.  Wire keys stay camelCase (``brandName``) for API
compatibility; Python code uses snake_case attributes (``brand_name``).
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Payload ``type`` value that marks the one profile record in the collection.
PROFILE_MARKER = "user_brand_variables"


class BrandAttributes(BaseModel):
    """The named brand attributes a user can declare.

    Every field is optional.  Unknown keys are rejected on input so a typo
    in a request surfaces as a validation error instead of being silently
    dropped.  Field order is the serialization order used for ``content``
    and for the rendered profile block in chat prompts.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    # --- Identity ---
    brand_name: str | None = Field(default=None, description="The official name of the brand.")
    brand_mission: str | None = Field(default=None, description="Purpose and mission statement.")
    brand_values: str | None = Field(default=None, description="Principles that guide the brand.")
    brand_promise: str | None = Field(default=None, description="What the brand promises customers.")
    # --- Voice ---
    brand_voice: str | None = Field(default=None, description="How the brand speaks.")
    brand_personality: str | None = Field(default=None, description="Personality traits.")
    preferred_tone: str | None = Field(default=None, description="Tone for communications.")
    communication_style: str | None = Field(default=None, description="Style of communication.")
    # --- Audience & positioning ---
    target_audience: str | None = Field(default=None, description="Main target audience.")
    key_messages: str | None = Field(default=None, description="Main messages to convey.")
    competitive_differentiator: str | None = Field(
        default=None, description="What sets the brand apart from competitors."
    )
    industry_focus: str | None = Field(default=None, description="Primary industry or sector.")
    # --- Expression ---
    brand_tagline: str | None = Field(default=None, description="Memorable tagline or slogan.")
    brand_archetype: str | None = Field(default=None, description="Brand archetype.")
    do_not_say: str | None = Field(default=None, description="Words or phrases to avoid.")
    brand_guidelines: str | None = Field(default=None, description="Any other guidelines.")

    @classmethod
    def wire_keys(cls) -> list[str]:
        """Return the camelCase keys accepted on the wire, in schema order."""
        return [field.alias or name for name, field in cls.model_fields.items()]

    @classmethod
    def from_stored(cls, mapping: dict[str, Any] | None) -> BrandAttributes:
        """Build attributes from a stored payload, dropping unknown or non-string entries.

        Stored records may predate the fixed schema, so reads are lenient
        where request validation is strict.
        """
        if not mapping:
            return cls()
        known = set(cls.wire_keys())
        clean = {k: v for k, v in mapping.items() if k in known and isinstance(v, str)}
        return cls.model_validate(clean)

    def to_mapping(self) -> dict[str, str]:
        """Return the camelCase mapping of every field that was set (including empty strings)."""
        return self.model_dump(by_alias=True, exclude_none=True)

    def non_empty_items(self) -> list[tuple[str, str]]:
        """Return ``(camelCaseKey, value)`` pairs whose value has visible text."""
        return [(k, v) for k, v in self.to_mapping().items() if v.strip()]

    @property
    def has_values(self) -> bool:
        return bool(self.non_empty_items())


class BrandProfile(BaseModel):
    """The singleton stored profile record, as read back from the vector store."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Opaque point identifier in the vector store.")
    attributes: BrandAttributes = Field(default_factory=BrandAttributes)
    content: str = Field(default="", description="Serialized, length-bounded attribute text.")
    vector: list[float] = Field(default_factory=list)
    has_embedding: bool = False
    updated_at: datetime | None = None
