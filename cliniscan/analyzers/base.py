from cliniscan.core.errors import INVALID_JSON, PayloadParseError
from cliniscan.core.result import FileFormat, FormatAnalysisOutcome
from cliniscan.utils.logger import get_logger


class BaseFormatAnalyzer:
    """
    Base class for format analyzers.

    Contract:
    - analyze() MUST return a FormatAnalysisOutcome
    - PayloadParseError raised by parse steps becomes INVALID_JSON
    - any other exception propagates to the engine boundary
    """

    file_format: FileFormat = FileFormat.UNKNOWN

    def __init__(self):
        self.log = get_logger(f"cliniscan.analyzers.{self.file_format.value}")

    def analyze(self, content: str, filename: str) -> FormatAnalysisOutcome:
        try:
            return self.analyze_content(content, filename)
        except PayloadParseError as e:
            self.log.info("Payload of %s could not be parsed: %s", filename, e)
            return FormatAnalysisOutcome.failure(INVALID_JSON, str(e))

    def analyze_content(self, content: str, filename: str) -> FormatAnalysisOutcome:
        raise NotImplementedError("Format analyzers must implement analyze_content()")
