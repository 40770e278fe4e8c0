"""This module builds the conversation sent to Gemini for an edital chat."""

from google.genai import types
from licitasaas.constants.prompts import (
    CHAT_FRAMING_TEXT,
    CHAT_PDFS_ATTACHED,
    CHAT_PDFS_MISSING,
    CHAT_SYSTEM_INSTRUCTION_TEMPLATE,
)
from licitasaas.models.chat import ChatContext, ChatMessage, ConversationTurn, TurnRole


class ChatContextAssembler:
    """Turns a client message history into model turns plus a system prompt.

    The history is passed through in order: roles are mapped but alternation
    is not checked. Document context is injected into the first turn only.
    """

    def assemble(
        self,
        messages: list[ChatMessage],
        file_parts: list[types.Part],
        fallback_text_context: str,
    ) -> ChatContext:
        """Assembles the turns and the system instruction of a chat call.

        Args:
            messages: The client history, oldest first.
            file_parts: The inline parts of the authorized files.
            fallback_text_context: The summary of a prior analysis, possibly
                empty. It is embedded verbatim in the system instruction.

        Returns:
            The turns and the system instruction.
        """
        turns = [self._to_turn(message) for message in messages]

        if turns and turns[0].role == TurnRole.USER:
            turns[0].parts = [*file_parts, *turns[0].parts]
        else:
            opening = ConversationTurn(role=TurnRole.USER, parts=[*file_parts, types.Part(text=CHAT_FRAMING_TEXT)])
            turns.insert(0, opening)

        return ChatContext(
            turns=turns,
            system_instruction=self.build_system_instruction(bool(file_parts), fallback_text_context),
        )

    def build_system_instruction(self, has_files: bool, fallback_text_context: str) -> str:
        """Renders the chat system instruction.

        Args:
            has_files: Whether original PDFs are attached to the conversation.
            fallback_text_context: The prior analysis summary, possibly empty.

        Returns:
            The system instruction, stating which sources are available.
        """
        return CHAT_SYSTEM_INSTRUCTION_TEMPLATE.format(
            document_condition=CHAT_PDFS_ATTACHED if has_files else CHAT_PDFS_MISSING,
            fallback_context=fallback_text_context,
        )

    @staticmethod
    def _to_turn(message: ChatMessage) -> ConversationTurn:
        role = TurnRole.USER if message.role == TurnRole.USER else TurnRole.ASSISTANT
        return ConversationTurn(role=role, parts=[types.Part(text=message.text)])
