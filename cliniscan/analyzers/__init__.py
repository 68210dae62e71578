"""
Format analyzers.

Analyzers are explicitly registered here for clarity and auditability;
there is no dynamic discovery.
"""

from cliniscan.analyzers.base import BaseFormatAnalyzer
from cliniscan.analyzers.clinical_document import (
    ClinicalDocumentAnalyzer,
    count_clinical_document,
)
from cliniscan.analyzers.csv_analyzer import CsvAnalyzer
from cliniscan.analyzers.html_survey import HtmlSurveyAnalyzer
from cliniscan.analyzers.json_analyzer import JsonAnalyzer
from cliniscan.core.result import FileFormat

ANALYZERS = {
    FileFormat.CSV: CsvAnalyzer(),
    FileFormat.JSON: JsonAnalyzer(),
    FileFormat.HL7: ClinicalDocumentAnalyzer(),
    FileFormat.HTML: HtmlSurveyAnalyzer(),
}


def get_analyzer(file_format: FileFormat) -> BaseFormatAnalyzer:
    return ANALYZERS[file_format]


__all__ = [
    "ANALYZERS",
    "BaseFormatAnalyzer",
    "ClinicalDocumentAnalyzer",
    "CsvAnalyzer",
    "HtmlSurveyAnalyzer",
    "JsonAnalyzer",
    "count_clinical_document",
    "get_analyzer",
]
