from halp.models.events import Done, Error, StreamEvent, TextDelta, is_terminal
from halp.models.provider import ProviderConfig

__all__ = ["Done", "Error", "ProviderConfig", "StreamEvent", "TextDelta", "is_terminal"]
