"""
JSON reporter: outputs diagnostics as structured JSON for programmatic use.
"""

import json
import logging

from permlint.engine.diagnostic import Diagnostic

logger = logging.getLogger(__name__)


def report_json(diagnostics: list[Diagnostic]) -> str:
    """
    Format diagnostics as a JSON array of {message, filepath, line, column}.

    Args:
        diagnostics: List of Diagnostic objects to report.

    Returns:
        A JSON string with all diagnostics.
    """
    output = json.dumps([d.to_dict() for d in diagnostics], indent=2)
    logger.info("JSON report: %d diagnostic(s), %d bytes", len(diagnostics), len(output))
    return output
