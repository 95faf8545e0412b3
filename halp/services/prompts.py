"""
System prompt for command generation.
"""

import os
import platform
from typing import Optional

# =============================================================================
# DEFAULT PROMPT
# =============================================================================

DEFAULT_PROMPT = """You are a command-line assistant. Generate a shell command for the user's request.

Format your response EXACTLY as:
COMMAND: <the exact command to run>
EXPLANATION: <brief one-line explanation>

Context:
- OS: {{os}}
- Shell: {{shell}}
- Working directory: {{cwd}}

Rules:
- Output exactly one command (use && or ; for multi-step operations)
- The command must be valid for the specified OS and shell
- Prefer common, portable commands when possible
- Keep explanation to one concise line
- Never include dangerous commands (rm -rf /, etc) without explicit confirmation flags
- If the request is ambiguous, make a reasonable assumption and note it in the explanation"""


# =============================================================================
# CONTEXT
# =============================================================================


def get_os() -> str:
    return f"{platform.system().lower()} ({platform.machine()})"


def get_shell() -> str:
    shell = os.environ.get("SHELL", "")
    return os.path.basename(shell.rstrip("/")) or "unknown"


def get_cwd() -> str:
    try:
        return os.getcwd()
    except OSError:
        return "unknown"


def render_template(template: str, context: dict[str, str]) -> str:
    """Replace {{name}} placeholders; unknown placeholders are left as-is."""
    for key, value in context.items():
        template = template.replace("{{" + key + "}}", value)
    return template


def build_system_prompt(template: Optional[str] = None) -> str:
    """
    Build the system prompt for the current machine.

    Args:
        template: Custom template from configuration. Supports {{os}},
            {{shell}} and {{cwd}} placeholders.

    Returns:
        The rendered system prompt
    """
    context = {
        "os": get_os(),
        "shell": get_shell(),
        "cwd": get_cwd(),
    }
    return render_template(template or DEFAULT_PROMPT, context)
