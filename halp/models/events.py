"""
Normalized stream events produced by provider adapters.

Every provider converts its own wire payloads into this small set so the
parser never sees vendor JSON.
"""

from dataclasses import dataclass
from typing import Optional, Union

from halp.utils.exceptions import HalpError


@dataclass(frozen=True)
class TextDelta:
    """One incremental fragment of generated text"""

    text: str


@dataclass(frozen=True)
class Done:
    """The provider finished the response"""


@dataclass(frozen=True)
class Error:
    """The stream failed; terminal like Done"""

    message: str
    cause: Optional[HalpError] = None


StreamEvent = Union[TextDelta, Done, Error]


def is_terminal(event: StreamEvent) -> bool:
    return isinstance(event, (Done, Error))
