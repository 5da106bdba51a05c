"""
Text reporter: one `path:line:col: message` line per diagnostic.
"""

from permlint.engine.diagnostic import Diagnostic, EXCESSIVE_RULE_ID, INSUFFICIENT_RULE_ID


# ANSI color codes for terminal output (click.echo strips them when not a tty)
COLORS = {
    EXCESSIVE_RULE_ID:    "\033[33m",  # yellow
    INSUFFICIENT_RULE_ID: "\033[31m",  # red
}
BOLD = "\033[1m"
RESET = "\033[0m"


def _format_line(d: Diagnostic) -> str:
    color = COLORS.get(d.rule_id, "")
    location = f"{d.file_path}:{d.line}:{d.column}:"
    return f"{BOLD}{location}{RESET} {color}{d.message}{RESET}"


def report_text(diagnostics: list[Diagnostic]) -> str:
    """
    Format diagnostics as text, in the order they were produced.

    Returns:
        The report; empty when there are no diagnostics.
    """
    return "\n".join(_format_line(d) for d in diagnostics)
