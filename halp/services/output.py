"""
Dual-channel output.

The command goes to the primary sink (stdout) exactly once, after it is fully
resolved, so `$(halp ...)` never captures a partial command. Explanation text
streams to the secondary sink (stderr) as it is parsed.
"""

from typing import Callable, Optional, TextIO

from rich.console import Console
from rich.style import Style

DIM = Style(dim=True)


class DualChannelWriter:
    """Route the command and the explanation to separate sinks.

    Suppressed channels are still written to by the pipeline; their output is
    simply dropped here, so parsing always runs to completion.
    """

    def __init__(
        self,
        primary: TextIO,
        secondary: TextIO,
        suppress_command: bool = False,
        suppress_explanation: bool = False,
        on_first_output: Optional[Callable[[], None]] = None,
    ):
        self.primary = primary
        self.suppress_command = suppress_command
        self.suppress_explanation = suppress_explanation
        self._console = Console(file=secondary)
        self._on_first_output = on_first_output
        self._command_written = False
        self._explanation_started = False

    @property
    def command_written(self) -> bool:
        return self._command_written

    def _first_output(self) -> None:
        if self._on_first_output:
            callback, self._on_first_output = self._on_first_output, None
            callback()

    def write_explanation(self, fragment: str) -> None:
        """Stream one explanation fragment, unbuffered."""
        if not fragment:
            return
        self._first_output()
        if self.suppress_explanation:
            return
        self._explanation_started = True
        # Fragments reach the sink unmodified apart from the dim escape codes
        if self._console.color_system:
            fragment = DIM.render(fragment)
        self._console.file.write(fragment)
        self._console.file.flush()

    def write_command(self, command: str) -> None:
        """Write the resolved command; allowed once per request."""
        if self._command_written:
            raise RuntimeError("Command already written for this request")
        self._command_written = True
        self._first_output()
        if self.suppress_command:
            return
        self.primary.write(command + "\n")
        self.primary.flush()

    def finish(self) -> None:
        """Terminate the explanation line, if one was started."""
        self._first_output()
        if self._explanation_started:
            self._console.file.write("\n")
            self._console.file.flush()
            self._explanation_started = False
