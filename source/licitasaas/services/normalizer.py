"""This module recovers the JSON document from a raw edital-analysis answer.

The model is told to answer with a bare JSON object, but it still wraps it in
Markdown fences, adds prose around it, leaves trailing commas or stops
mid-object when it runs out of tokens. The normalizer strips and slices the
text, applies a few mechanical repairs and parses it leniently with `json5`.
When nothing can be recovered, the sliced text is written to a single-slot
dump file so operators can inspect it without repeating the AI call.
"""

import re
from pathlib import Path
from typing import Any

import json5
from licitasaas.exceptions.analysis import MalformedResponseError
from licitasaas.providers.logging import Logger, LoggingProvider

_CODE_FENCE_JSON = re.compile(r"```json", re.IGNORECASE)
_CODE_FENCE = "```"
_CONTROL_CHARACTERS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")
_TRAILING_COMMA = re.compile(r",\s*([}\]])")
_CLOSERS = {"{": "}", "[": "]"}


def strip_code_fences(raw_text: str) -> str:
    """Removes every Markdown code-fence marker and trims the result.

    Args:
        raw_text: The raw model output.

    Returns:
        The text without ```` ```json ```` or ```` ``` ```` markers.
    """
    return _CODE_FENCE_JSON.sub("", raw_text).replace(_CODE_FENCE, "").strip()


def slice_object_span(text: str) -> str:
    """Keeps the span from the first `{` to the last `}`.

    Args:
        text: The fence-stripped text.

    Returns:
        The sliced span when both braces exist. A text with an opening brace
        but no closing one is cut from the opening brace, which keeps a
        truncated object repairable. Text without braces is returned as is.
    """
    first_brace = text.find("{")
    if first_brace == -1:
        return text
    last_brace = text.rfind("}")
    if last_brace < first_brace:
        return text[first_brace:]
    return text[first_brace : last_brace + 1]


def closing_suffix(text: str) -> str:
    """Computes the characters that close whatever a truncated text left open.

    Args:
        text: A JSON-like text.

    Returns:
        A closing quote if the text stops inside a string literal, followed
        by the closers of every open object and array, innermost first.
    """
    open_brackets: list[str] = []
    in_string = False
    escaped = False
    for char in text:
        if escaped:
            escaped = False
        elif char == "\\":
            escaped = True
        elif char == '"':
            in_string = not in_string
        elif in_string:
            continue
        elif char in _CLOSERS:
            open_brackets.append(_CLOSERS[char])
        elif open_brackets and char == open_brackets[-1]:
            open_brackets.pop()

    suffix = '"' if in_string else ""
    return suffix + "".join(reversed(open_brackets))


def repair_json_text(text: str) -> str:
    """Applies the mechanical repairs for common model output defects.

    Control characters become spaces, trailing commas are removed, and an
    object cut short by the output token limit gets its closers appended.

    Args:
        text: The sliced JSON-like text.

    Returns:
        The repaired text.
    """
    repaired = _CONTROL_CHARACTERS.sub(" ", text)
    repaired = _TRAILING_COMMA.sub(r"\1", repaired)
    if repaired.startswith("{"):
        repaired += closing_suffix(repaired)
    return repaired


class AnalysisResponseNormalizer:
    """Turns a raw analysis answer into a JSON object."""

    logger: Logger
    dump_path: Path | None

    def __init__(self, dump_path: Path | None) -> None:
        """Initializes the normalizer.

        Args:
            dump_path: Where to write the text of an unparsable answer. The
                file is overwritten on every failure. None disables the dump.
        """
        self.logger = LoggingProvider().get_logger()
        self.dump_path = dump_path

    def normalize(self, raw_text: str) -> dict[str, Any]:
        """Extracts and parses the JSON object contained in an answer.

        Args:
            raw_text: The text returned by the model.

        Returns:
            The parsed, non-empty top-level object. Its schema is not checked
            beyond that; consumers must tolerate missing fields.

        Raises:
            MalformedResponseError: If no non-empty JSON object can be recovered.
        """
        sliced = slice_object_span(strip_code_fences(raw_text))

        try:
            document = json5.loads(repair_json_text(sliced))
        except ValueError as e:
            self._dump(sliced)
            self.logger.error(f"JSON parse error after repair attempts: {e}")
            raise MalformedResponseError(f"A IA não retornou um JSON válido: {e}", raw_text=sliced) from e

        if not isinstance(document, dict) or not document:
            self._dump(sliced)
            self.logger.error(f"AI response is not a non-empty JSON object: {type(document).__name__}")
            raise MalformedResponseError("A IA não retornou um objeto JSON.", raw_text=sliced)

        self.logger.info(f"Successfully parsed JSON. Top-level keys: {', '.join(document)}")
        return document

    def _dump(self, text: str) -> None:
        """Overwrites the diagnostic dump with the unparsable text.

        A failure to write the dump is logged and does not mask the parse
        error being raised.

        Args:
            text: The text that failed to parse.
        """
        if self.dump_path is None:
            return
        try:
            self.dump_path.parent.mkdir(parents=True, exist_ok=True)
            self.dump_path.write_text(text, encoding="utf-8")
            self.logger.error(f"Unparsable AI response dumped to {self.dump_path}.")
        except OSError as e:
            self.logger.error(f"Could not write the failed JSON dump to {self.dump_path}: {e}")
