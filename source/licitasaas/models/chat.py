"""This module defines the Pydantic models for chat conversations."""

from enum import StrEnum

from google.genai import types
from pydantic import BaseModel, Field


class TurnRole(StrEnum):
    """The two sides of a conversation."""

    USER = "user"
    ASSISTANT = "assistant"


class ChatMessage(BaseModel):
    """A message as sent by the client.

    Attributes:
        role: The client-side role. Only `user` is meaningful; any other value
            is treated as the assistant.
        text: The message body.
    """

    role: str
    text: str = ""


class ConversationTurn(BaseModel):
    """One turn of the conversation sent to the model.

    Attributes:
        role: Who produced the turn.
        parts: The ordered content segments, text and inline file data.
    """

    role: TurnRole
    parts: list[types.Part] = Field(default_factory=list)

    def to_content(self) -> types.Content:
        """Converts the turn into the SDK representation.

        Gemini names the assistant side `model`.

        Returns:
            The matching `types.Content`.
        """
        role = "user" if self.role == TurnRole.USER else "model"
        return types.Content(role=role, parts=list(self.parts))


class ChatContext(BaseModel):
    """Everything needed to issue one chat call.

    Attributes:
        turns: The conversation, with document context injected in turn 0.
        system_instruction: The system prompt, including the textual fallback.
    """

    turns: list[ConversationTurn]
    system_instruction: str

    def contents(self) -> list[types.Content]:
        """Returns the turns in SDK form.

        Returns:
            The list of `types.Content`, in conversation order.
        """
        return [turn.to_content() for turn in self.turns]
