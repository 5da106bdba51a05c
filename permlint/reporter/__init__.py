from .text_reporter import report_text
from .json_reporter import report_json
from .sarif_reporter import report_sarif

__all__ = ["report_text", "report_json", "report_sarif"]
