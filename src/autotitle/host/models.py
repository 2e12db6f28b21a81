"""Pydantic models for the host runtime's session and provider data."""

from typing import Any

from pydantic import BaseModel, Field


class ModelRef(BaseModel):
    """A provider/model pair as the host expects it in prompt requests."""

    provider_id: str = Field(alias="providerID", serialization_alias="providerID")
    model_id: str = Field(alias="modelID", serialization_alias="modelID")

    model_config = {"populate_by_name": True, "frozen": True}

    def __str__(self) -> str:
        return f"{self.provider_id}/{self.model_id}"


class SessionInfo(BaseModel):
    """The slice of a host session this plugin reads."""

    id: str | None = None
    title: str | None = None

    model_config = {"extra": "allow"}


class MessagePart(BaseModel):
    """One part of a message; only text parts carry usable content."""

    type: str | None = None
    text: str | None = None

    model_config = {"extra": "allow"}

    @property
    def text_content(self) -> str | None:
        if self.type == "text" and self.text:
            return self.text
        return None


class MessageInfo(BaseModel):
    """Message metadata."""

    id: str | None = None
    role: str | None = None

    model_config = {"extra": "allow"}


class Message(BaseModel):
    """A message as listed by the host: metadata plus parts."""

    info: MessageInfo = Field(default_factory=MessageInfo)
    role: str | None = None
    parts: list[MessagePart] = Field(default_factory=list)

    model_config = {"extra": "allow"}

    @property
    def message_role(self) -> str | None:
        return self.info.role or self.role

    @property
    def first_text(self) -> str | None:
        """Text of the first text part, if any."""
        for part in self.parts:
            if part.text_content:
                return part.text_content
        return None


class ConversationTurn(BaseModel):
    """The first user message and the first assistant reply of a session."""

    user_text: str | None = None
    assistant_text: str | None = None

    @classmethod
    def from_messages(cls, messages: list[Message]) -> "ConversationTurn":
        turn = cls()
        for message in messages:
            text = message.first_text
            if not text:
                continue
            role = message.message_role
            if role == "user" and turn.user_text is None:
                turn.user_text = text
            elif role == "assistant" and turn.assistant_text is None:
                turn.assistant_text = text
            if turn.user_text and turn.assistant_text:
                break
        return turn


class ProviderCatalogEntry(BaseModel):
    """A provider with its models.

    ``models`` is either a list (of ids or id-bearing objects) or a mapping
    keyed by model id, depending on the host version.
    """

    id: str | None = None
    models: Any = Field(default_factory=list)

    model_config = {"extra": "allow"}
