"""Unit tests for the ChatContextAssembler."""

import pytest
from google.genai import types
from licitasaas.constants.prompts import CHAT_FRAMING_TEXT, CHAT_PDFS_ATTACHED, CHAT_PDFS_MISSING
from licitasaas.models.chat import ChatMessage, TurnRole
from licitasaas.services.chat_context import ChatContextAssembler


@pytest.fixture
def file_part() -> types.Part:
    return types.Part.from_bytes(data=b"%PDF-1.7", mime_type="application/pdf")


def test_files_are_prepended_to_first_user_turn(file_part: types.Part) -> None:
    """Tests that the first user turn carries the files before its text."""
    context = ChatContextAssembler().assemble([ChatMessage(role="user", text="Q1")], [file_part], "")

    assert len(context.turns) == 1
    parts = context.turns[0].parts
    assert parts[0].inline_data is not None
    assert parts[0].inline_data.data == b"%PDF-1.7"
    assert parts[1].text == "Q1"


def test_only_first_turn_receives_files(file_part: types.Part) -> None:
    """Tests that later turns are passed through unchanged."""
    messages = [
        ChatMessage(role="user", text="Q1"),
        ChatMessage(role="assistant", text="A1"),
        ChatMessage(role="user", text="Q2"),
    ]

    context = ChatContextAssembler().assemble(messages, [file_part], "")

    assert [turn.role for turn in context.turns] == [TurnRole.USER, TurnRole.ASSISTANT, TurnRole.USER]
    assert [len(turn.parts) for turn in context.turns] == [2, 1, 1]
    assert [content.role for content in context.contents()] == ["user", "model", "user"]


def test_empty_history_gets_framing_turn(file_part: types.Part) -> None:
    """Tests that an empty history still sends the documents."""
    context = ChatContextAssembler().assemble([], [file_part], "")

    assert len(context.turns) == 1
    assert context.turns[0].role == TurnRole.USER
    assert context.turns[0].parts[-1].text == CHAT_FRAMING_TEXT


def test_history_starting_with_assistant_gets_user_turn_first(file_part: types.Part) -> None:
    """Tests that a user turn is inserted before a leading assistant turn."""
    messages = [ChatMessage(role="assistant", text="Olá, como posso ajudar?"), ChatMessage(role="user", text="Q1")]

    context = ChatContextAssembler().assemble(messages, [file_part], "")

    assert [turn.role for turn in context.turns] == [TurnRole.USER, TurnRole.ASSISTANT, TurnRole.USER]
    assert context.turns[0].parts[-1].text == CHAT_FRAMING_TEXT
    assert context.turns[2].parts[0].text == "Q1"


def test_unknown_role_is_treated_as_assistant() -> None:
    """Tests that any role other than user maps to the assistant."""
    context = ChatContextAssembler().assemble(
        [ChatMessage(role="user", text="Q1"), ChatMessage(role="model", text="A1")], [], ""
    )

    assert context.turns[1].role == TurnRole.ASSISTANT


def test_system_instruction_states_available_sources() -> None:
    """Tests the document condition and the embedded fallback summary."""
    assembler = ChatContextAssembler()

    with_files = assembler.build_system_instruction(True, "")
    fallback_only = assembler.build_system_instruction(False, "CONTEÚDO DO RELATÓRIO ANALÍTICO EXISTENTE:\nResumo")

    assert CHAT_PDFS_ATTACHED in with_files
    assert CHAT_PDFS_MISSING not in with_files
    assert CHAT_PDFS_MISSING in fallback_only
    assert "Resumo" in fallback_only
