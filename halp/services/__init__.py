from halp.services.output import DualChannelWriter
from halp.services.parser import ParsedResponse, ParserMode, ResponseParser
from halp.services.pipeline import QueryResult, run_query
from halp.services.prompts import build_system_prompt

__all__ = [
    "DualChannelWriter",
    "ParsedResponse",
    "ParserMode",
    "QueryResult",
    "ResponseParser",
    "build_system_prompt",
    "run_query",
]
