"""
Single-request query pipeline.

Pulls normalized events from a provider, feeds text deltas through the
ResponseParser and forwards its output to the DualChannelWriter:

    provider.stream_completion -> ResponseParser -> DualChannelWriter

The command reaches the primary channel only once the stream has ended and a
command was resolved. On failure the primary channel receives nothing.
"""

import logging
from contextlib import aclosing
from dataclasses import dataclass
from typing import Optional

from halp.models import Done, Error, TextDelta
from halp.providers.base import BaseProvider
from halp.services.output import DualChannelWriter
from halp.services.parser import ResponseParser
from halp.utils.exceptions import EmptyResponse

logger = logging.getLogger(__name__)


@dataclass
class QueryResult:
    """Outcome of a successful request"""

    command: str
    explanation: Optional[str] = None
    interrupted: bool = False  # stream failed after the command was resolved
    error: Optional[str] = None


async def run_query(
    provider: BaseProvider,
    prompt: str,
    system_prompt: str,
    writer: DualChannelWriter,
) -> QueryResult:
    """
    Stream one completion and route it to the writer.

    Returns:
        QueryResult with the resolved command

    Raises:
        EmptyResponse: the stream ended, or failed, without a usable command
    """
    parser = ResponseParser()
    error: Optional[Error] = None

    try:
        async with aclosing(provider.stream_completion(prompt, system_prompt)) as events:
            async for event in events:
                if isinstance(event, TextDelta):
                    for fragment in parser.feed(event.text):
                        writer.write_explanation(fragment)
                elif isinstance(event, Error):
                    error = event
                    break
                elif isinstance(event, Done):
                    break

        if error is None:
            for fragment in parser.finish():
                writer.write_explanation(fragment)
        else:
            parser.fail(error.message)
    finally:
        writer.finish()

    command = parser.command
    explanation = parser.explanation or None

    if command is None:
        if error is not None:
            raise EmptyResponse(
                f"No command received: {error.message}", explanation=parser.explanation
            ) from error.cause
        raise EmptyResponse(
            "Could not extract command from response", explanation=parser.explanation
        )

    if error is not None:
        logger.warning(f"Stream from {provider.name} ended early: {error.message}")

    writer.write_command(command)
    return QueryResult(
        command=command,
        explanation=explanation,
        interrupted=error is not None,
        error=error.message if error is not None else None,
    )


