"""
halp - shell commands from natural language, streamed from an LLM provider.
"""

__version__ = "0.1.0"
