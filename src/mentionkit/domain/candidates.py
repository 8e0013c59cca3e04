"""Domain models for suggestion candidates.

The host supplies users and tags as plain dictionaries (camelCase keys, as a
web front end would send them). These Pydantic models validate that feed once
at construction time; the core never mutates or persists them.
"""

from pydantic import BaseModel, ConfigDict, Field

from mentionkit.domain.types import TriggerKind


class UserData(BaseModel):
    """A user that can be mentioned with ``@``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(..., description="Stable identifier of the user")
    username: str = Field(..., description="Handle matched against the query")
    display_name: str = Field(..., alias="displayName", description="Name shown in the popup")
    href: str = Field(..., description="Link target of the mention")
    avatar_url: str | None = Field(None, alias="avatarUrl", description="Avatar image URL")

    @property
    def label(self) -> str:
        return self.display_name

    def to_suggestion(self) -> "SuggestionItem":
        return SuggestionItem(id=self.id, label=self.label, href=self.href, kind=TriggerKind.MENTION)


class TagData(BaseModel):
    """A tag that can be referenced with ``#``."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Stable identifier of the tag")
    tag: str = Field(..., description="Tag text, matched against the query")
    href: str = Field(..., description="Link target of the tag")

    @property
    def label(self) -> str:
        return self.tag

    def to_suggestion(self) -> "SuggestionItem":
        return SuggestionItem(id=self.id, label=self.label, href=self.href, kind=TriggerKind.TAG)


class SuggestionItem(BaseModel):
    """Uniform shape handed to the presentation layer."""

    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    href: str
    kind: TriggerKind = TriggerKind.MENTION

    def to_display_dict(self) -> dict[str, str]:
        """Convert to dictionary for display in UI.

        Returns:
            Dictionary with id, label and href fields
        """
        return {"id": self.id, "label": self.label, "href": self.href}
