"""
Incremental COMMAND / EXPLANATION parser.

The model is asked to answer as

    COMMAND: <the exact command to run>
    EXPLANATION: <brief one-line explanation>

but the text arrives token by token, and models sometimes answer with a
fenced code block or bare text instead. ResponseParser classifies the text as
it streams in:

    SEEKING -> {IN_COMMAND, FENCED_BLOCK, RAW} -> IN_EXPLANATION -> TERMINAL

Markers are case-sensitive and only match at the start of a line. The first
marker seen wins; the parser never backtracks. Explanation text is handed
back as soon as it is known so the caller can stream it.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

logger = logging.getLogger(__name__)

COMMAND_PREFIX = "COMMAND:"
EXPLANATION_PREFIX = "EXPLANATION:"
FENCE = "```"
# Unmarked text after which a late marker is no longer expected
RAW_THRESHOLD = 2048


class ParserMode(str, Enum):
    SEEKING = "seeking"
    IN_COMMAND = "in_command"
    IN_EXPLANATION = "in_explanation"
    FENCED_BLOCK = "fenced_block"
    RAW = "raw"
    TERMINAL = "terminal"


@dataclass
class ParsedResponse:
    """Parse state for one response; owned by a single ResponseParser"""

    command: Optional[str] = None
    explanation_buffer: str = ""  # concatenation of every emitted fragment
    mode: ParserMode = ParserMode.SEEKING


class ResponseParser:
    """Turn an ordered stream of text deltas into a command and an explanation.

    `feed` and `finish` return the explanation fragments produced by that
    call, in order. Fragments are never retracted: leading whitespace before
    the explanation is dropped and trailing whitespace is held back until more
    text shows it is not trailing.
    """

    def __init__(self):
        self.response = ParsedResponse()
        self._pending = ""  # partial line not yet classified
        self._raw_text = ""
        self._fence_lines: List[str] = []
        self._fence_closed = False
        self._held_whitespace = ""

    @property
    def mode(self) -> ParserMode:
        return self.response.mode

    @property
    def command(self) -> Optional[str]:
        return self.response.command

    @property
    def explanation(self) -> str:
        return self.response.explanation_buffer

    def feed(self, text: str) -> List[str]:
        """Consume one text delta."""
        if self.mode == ParserMode.TERMINAL:
            raise RuntimeError("Parser already finished")

        fragments: List[str] = []
        if not text:
            return fragments
        if self.mode == ParserMode.IN_EXPLANATION:
            self._emit(text, fragments)
        elif self.mode == ParserMode.RAW:
            self._raw_text += text
        else:
            self._pending += text
            self._drain(fragments, final=False)
        return fragments

    def finish(self) -> List[str]:
        """End of stream: resolve whatever the text so far supports."""
        if self.mode == ParserMode.TERMINAL:
            raise RuntimeError("Parser already finished")

        fragments: List[str] = []
        if self.mode not in (ParserMode.IN_EXPLANATION, ParserMode.RAW):
            self._drain(fragments, final=True)

        if self.mode == ParserMode.SEEKING:
            # No marker ever showed up
            self.response.mode = ParserMode.RAW
        if self.mode == ParserMode.RAW:
            self._set_command(self._raw_text)
        elif self.mode == ParserMode.FENCED_BLOCK and not self._fence_closed:
            self._set_command("\n".join(self._fence_lines))

        self._held_whitespace = ""
        self.response.mode = ParserMode.TERMINAL
        return fragments

    def fail(self, message: str) -> None:
        """Stream ended with an error; nothing further is resolved."""
        logger.debug(f"Parser stopped in {self.mode.value} mode: {message}")
        self._held_whitespace = ""
        self._pending = ""
        self.response.mode = ParserMode.TERMINAL

    def _drain(self, fragments: List[str], final: bool) -> None:
        """Classify complete lines from the pending buffer.

        With `final`, a trailing line without a newline is classified too.
        """
        while self.mode in (
            ParserMode.SEEKING,
            ParserMode.IN_COMMAND,
            ParserMode.FENCED_BLOCK,
        ):
            if self.mode == ParserMode.IN_COMMAND and self.command is not None:
                if not self._await_explanation(fragments, final):
                    break
                continue

            newline = self._pending.find("\n")
            if newline == -1:
                if not final or not self._pending:
                    break
                line, self._pending = self._pending, ""
                terminated = False
            else:
                line = self._pending[:newline]
                self._pending = self._pending[newline + 1 :]
                terminated = True
            self._process_line(line.rstrip("\r"), terminated, fragments)

        # Anything left over now belongs to the new mode
        if self._pending:
            if self.mode == ParserMode.RAW:
                self._raw_text += self._pending
                self._pending = ""
            elif self.mode == ParserMode.IN_EXPLANATION:
                text, self._pending = self._pending, ""
                self._emit(text, fragments)

    def _await_explanation(self, fragments: List[str], final: bool) -> bool:
        """Look for the EXPLANATION marker once the command is known.

        The marker is matched as soon as its prefix is complete, without
        waiting for the end of the line. Returns False when more input is
        needed.
        """
        if self._pending.startswith(EXPLANATION_PREFIX):
            rest = self._pending[len(EXPLANATION_PREFIX) :]
            self._pending = ""
            self._start_explanation(rest, fragments)
            return True

        newline = self._pending.find("\n")
        if newline == -1:
            if final:
                self._pending = ""
            return False
        # Not a marker line; skip it
        self._pending = self._pending[newline + 1 :]
        return True

    def _process_line(self, line: str, terminated: bool, fragments: List[str]) -> None:
        if self.mode == ParserMode.SEEKING:
            if line.startswith(COMMAND_PREFIX):
                self.response.mode = ParserMode.IN_COMMAND
                self._resolve_command_line(line[len(COMMAND_PREFIX) :], terminated, fragments)
            elif line.startswith(FENCE):
                self._open_fence(line)
            else:
                self._raw_text += line + "\n"
                if len(self._raw_text) >= RAW_THRESHOLD:
                    logger.debug("No response markers found, treating output as raw command")
                    self.response.mode = ParserMode.RAW

        elif self.mode == ParserMode.IN_COMMAND:
            # "COMMAND:" was alone on its line; the command follows
            if line.startswith(FENCE):
                self._open_fence(line)
            else:
                self._resolve_command_line(line, terminated, fragments)

        elif self.mode == ParserMode.FENCED_BLOCK and not self._fence_closed:
            if line.startswith(FENCE):
                self._fence_closed = True
                self._set_command("\n".join(self._fence_lines))
            else:
                self._fence_lines.append(line)

    def _resolve_command_line(
        self, rest: str, terminated: bool, fragments: List[str]
    ) -> None:
        explanation = None
        marker = rest.find(EXPLANATION_PREFIX)
        if marker != -1:
            rest, explanation = rest[:marker], rest[marker + len(EXPLANATION_PREFIX) :]

        self._set_command(rest)
        if explanation is not None:
            if terminated:
                explanation += "\n"
            self._start_explanation(explanation, fragments)

    def _open_fence(self, line: str) -> None:
        self.response.mode = ParserMode.FENCED_BLOCK
        # Text after the opening fence is an info string, unless the block
        # also closes on this line
        rest = line[len(FENCE) :]
        close = rest.find(FENCE)
        if close != -1:
            self._fence_closed = True
            self._set_command(rest[:close])

    def _set_command(self, value: str) -> None:
        value = value.strip()
        if value and self.response.command is None:
            self.response.command = value

    def _start_explanation(self, text: str, fragments: List[str]) -> None:
        self.response.mode = ParserMode.IN_EXPLANATION
        self._emit(text, fragments)

    def _emit(self, text: str, fragments: List[str]) -> None:
        if not self.response.explanation_buffer:
            text = text.lstrip()
            if not text:
                return

        text = self._held_whitespace + text
        visible = text.rstrip()
        self._held_whitespace = text[len(visible) :]
        if visible:
            self.response.explanation_buffer += visible
            fragments.append(visible)
