"""
SARIF reporter: outputs diagnostics in SARIF 2.1.0 format for GitHub Code Scanning.

Upload the output to GitHub and findings appear as annotations on the
workflow files in the Security tab.

Reference: https://docs.github.com/en/code-security/code-scanning/integrating-with-code-scanning/sarif-support-for-code-scanning
"""

import json
import logging
from typing import Any

from permlint import __version__
from permlint.engine.diagnostic import Diagnostic, EXCESSIVE_RULE_ID, INSUFFICIENT_RULE_ID

logger = logging.getLogger(__name__)

_RULES: dict[str, dict[str, str]] = {
    EXCESSIVE_RULE_ID: {
        "level": "warning",
        "security-severity": "5.0",
        "description": "Job grants more permission than its actions require",
    },
    INSUFFICIENT_RULE_ID: {
        "level": "error",
        "security-severity": "3.0",
        "description": "Job grants less permission than its actions require",
    },
}

TOOL_NAME = "permlint"
SARIF_SCHEMA = "https://raw.githubusercontent.com/oasis-tcs/sarif-spec/master/Schemata/sarif-schema-2.1.0.json"
SARIF_VERSION = "2.1.0"


def _build_rules(diagnostics: list[Diagnostic]) -> list[dict[str, Any]]:
    """Build the SARIF rules array: one entry per rule ID that has results."""
    seen = []
    for d in diagnostics:
        if d.rule_id in _RULES and d.rule_id not in seen:
            seen.append(d.rule_id)

    rules = []
    for rule_id in seen:
        meta = _RULES[rule_id]
        rules.append({
            "id": rule_id,
            "name": rule_id.replace("-", " ").title().replace(" ", ""),
            "shortDescription": {"text": meta["description"]},
            "fullDescription": {"text": meta["description"]},
            "properties": {
                "security-severity": meta["security-severity"],
                "tags": ["security", "github-actions", "least-privilege"],
            },
        })
    return rules


def _build_result(d: Diagnostic) -> dict[str, Any]:
    """Build a single SARIF result object from a Diagnostic."""
    # SARIF regions are 1-based; diagnostics without a position point at the file start
    region = {"startLine": max(d.line, 1)}
    if d.column > 0:
        region["startColumn"] = d.column

    return {
        "ruleId": d.rule_id,
        "level": _RULES.get(d.rule_id, {}).get("level", "warning"),
        "message": {"text": d.message},
        "locations": [
            {
                "physicalLocation": {
                    "artifactLocation": {
                        "uri": d.file_path,
                        "uriBaseId": "%SRCROOT%",
                    },
                    "region": region,
                },
            }
        ],
    }


def report_sarif(diagnostics: list[Diagnostic]) -> str:
    """
    Format diagnostics as a SARIF 2.1.0 JSON string.

    The output can be uploaded to GitHub Code Scanning via:
      - uses: github/codeql-action/upload-sarif@v3
        with:
          sarif_file: results.sarif
    """
    sarif: dict[str, Any] = {
        "$schema": SARIF_SCHEMA,
        "version": SARIF_VERSION,
        "runs": [
            {
                "tool": {
                    "driver": {
                        "name": TOOL_NAME,
                        "version": __version__,
                        "rules": _build_rules(diagnostics),
                    }
                },
                "results": [_build_result(d) for d in diagnostics],
            }
        ],
    }

    output = json.dumps(sarif, indent=2)
    logger.info("SARIF report: %d diagnostic(s), %d bytes", len(diagnostics), len(output))
    return output
