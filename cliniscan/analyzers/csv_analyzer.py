import csv
import io
import re
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd
from dateutil import parser as date_parser

from cliniscan.analyzers.base import BaseFormatAnalyzer
from cliniscan.core.column_resolver import resolve_columns
from cliniscan.core.result import FileFormat, FormatAnalysisOutcome, PatientPreview
from cliniscan.detection.delimiter import detect_csv_delimiter

NO_PATIENT_COLUMN_WARNING = "No patient data detected - will use single patient mode"

COMMENT_PREFIX = "#"

# Header layouts
LAYOUT_SINGLE = "single"
LAYOUT_TWO_ROW = "two_row"        # display names + concept codes
LAYOUT_CONDENSED = "condensed"    # FIELD_NAME / VALTYPE_CD / UNIT_CD / NAME_CHAR

CONDENSED_MARKER = "FIELD_NAME"
CONDENSED_HEADER_ROWS = 4

# i2b2 column codes: PATIENT_CD, ENCOUNTER_NUM, START_DATE, NAME_CHAR ...
_COLUMN_CODE_RE = re.compile(r"^[A-Z][A-Z0-9]*(?:_[A-Z0-9]+)*_(?:CD|NUM|DATE|CHAR|BLOB|PATH|ID)$")

# Vocabulary-prefixed concept codes: "LID: 2951-2", "LOINC:2345-7"
_PREFIXED_CODE_RE = re.compile(r"^(?:LID|LOINC|ICD(?:9|10)?|SNOMED|SCT|CPT)\s*:\s*\S+$")

# "# Export date: 2024-03-01" -> export_date
_COMMENT_KEYS = {
    "export date": "export_date",
    "source": "source",
    "version": "version",
}


def _is_concept_code(cell: str) -> bool:
    text = cell.strip()
    return bool(_COLUMN_CODE_RE.match(text) or _PREFIXED_CODE_RE.match(text))


def parse_comment_metadata(comment_lines: List[str]) -> Dict[str, str]:
    metadata = {}

    for line in comment_lines:
        text = line.strip().lstrip(COMMENT_PREFIX).strip()
        if ":" not in text:
            continue

        key, value = text.split(":", 1)
        mapped = _COMMENT_KEYS.get(key.strip().lower())
        if mapped and value.strip():
            metadata[mapped] = value.strip()

    return metadata


def detect_header_layout(rows: List[List[str]]) -> Tuple[str, int]:
    """
    Returns (layout, number_of_header_rows).

    A second header row is only assumed when most of its cells are
    column or concept codes. Under a recognized patient-ID header the
    second row must hold a code in that column too, otherwise it is
    the first data row.
    """
    if not rows:
        return LAYOUT_SINGLE, 0

    first = rows[0]
    if first and first[0].strip().upper() == CONDENSED_MARKER:
        return LAYOUT_CONDENSED, min(CONDENSED_HEADER_ROWS, len(rows))

    if len(rows) >= 2:
        second = rows[1]
        cells = [c for c in second if c.strip()]
        codes = [c for c in cells if _is_concept_code(c)]

        patient_idx = resolve_columns([str(c) for c in first]).get("patient_id")
        patient_cell_is_value = (
            patient_idx is not None
            and patient_idx < len(second)
            and not _is_concept_code(second[patient_idx])
        )

        if cells and len(codes) * 2 > len(cells) and not patient_cell_is_value:
            return LAYOUT_TWO_ROW, 2

    return LAYOUT_SINGLE, 1


def _distinct(values) -> List[Any]:
    seen = {}
    for v in values:
        if v not in seen:
            seen[v] = None
    return list(seen)


class CsvAnalyzer(BaseFormatAnalyzer):
    """
    Lenient analyzer for delimited exports.

    Structural problems never fail the analysis: they surface as
    warnings with zero counts so the caller still gets a strategy.
    """

    file_format = FileFormat.CSV

    def analyze_content(self, content: str, filename: str) -> FormatAnalysisOutcome:
        lines = [line for line in (content or "").splitlines() if line.strip()]
        comment_lines = [l for l in lines if l.lstrip().startswith(COMMENT_PREFIX)]
        table_lines = [l for l in lines if not l.lstrip().startswith(COMMENT_PREFIX)]

        metadata: Dict[str, Any] = parse_comment_metadata(comment_lines)

        if not table_lines:
            return FormatAnalysisOutcome(
                warnings=("CSV file contains no tabular data",),
                metadata=metadata,
            )

        delimiter = detect_csv_delimiter(table_lines[0])
        metadata["delimiter"] = delimiter

        try:
            frame, skipped = self._read_frame(table_lines, delimiter)
        except (pd.errors.ParserError, pd.errors.EmptyDataError, csv.Error) as e:
            self.log.warning("CSV parsing failed for %s: %s", filename, e)
            return FormatAnalysisOutcome(
                warnings=(f"CSV content could not be parsed: {e}",),
                metadata=metadata,
            )

        rows = frame.values.tolist()
        layout, header_rows = detect_header_layout(rows)
        metadata["header_layout"] = layout
        metadata["columns"] = tuple(c.strip() for c in rows[0]) if rows else ()

        warnings: List[str] = []

        if skipped:
            warnings.append(f"{skipped} malformed row(s) could not be parsed and were ignored")

        if len(metadata["columns"]) < 2:
            warnings.append("Only one column detected - the delimiter could not be determined")

        data = frame.iloc[header_rows:]
        observations_count = len(data)

        if observations_count == 0:
            warnings.append("CSV contains header rows but no data rows")

        headers, resolved = self._resolve_header_rows(rows[:header_rows])
        patient_idx = resolved.get("patient_id")
        name_idx = resolved.get("patient_name")

        patients: List[PatientPreview] = []
        patient_ids = pd.Series([""] * len(data), index=data.index, dtype=object)

        if patient_idx is None:
            warnings.append(NO_PATIENT_COLUMN_WARNING)
        else:
            metadata["patient_column"] = headers[patient_idx].strip()
            patient_ids = data.iloc[:, patient_idx].str.strip()
            patients = self._patient_previews(data, patient_ids, name_idx)

        visits_count = self._count_visits(data, patient_ids, resolved, headers, metadata)

        return FormatAnalysisOutcome(
            patients_count=len(patients),
            visits_count=visits_count,
            observations_count=observations_count,
            patients=patients,
            warnings=warnings,
            metadata=metadata,
        )

    # -------------------------------------------------
    # PARSING
    # -------------------------------------------------

    def _read_frame(
        self, table_lines: List[str], delimiter: str
    ) -> Tuple[pd.DataFrame, int]:
        """
        Parse into a frame of strings. Returns the frame and the number
        of records dropped for having more fields than the header.
        """
        bad_lines: List[List[str]] = []

        def skip_bad_line(fields: List[str]) -> None:
            bad_lines.append(fields)
            return None

        frame = pd.read_csv(
            io.StringIO("\n".join(table_lines)),
            sep=delimiter,
            header=None,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            on_bad_lines=skip_bad_line,
            engine="python",
        )
        return frame.fillna(""), len(bad_lines)

    def _resolve_header_rows(
        self, header_rows: List[List[str]]
    ) -> Tuple[List[str], Dict[str, Optional[int]]]:
        """
        Resolve semantic columns on the first header row that names a
        patient column; fall back to the first row.
        """
        if not header_rows:
            return [], {}

        candidates = [[str(c) for c in row] for row in header_rows]
        for row in candidates:
            resolved = resolve_columns(row)
            if resolved.get("patient_id") is not None:
                return row, resolved

        return candidates[0], resolve_columns(candidates[0])

    # -------------------------------------------------
    # PATIENTS
    # -------------------------------------------------

    def _patient_previews(
        self,
        data: pd.DataFrame,
        patient_ids: pd.Series,
        name_idx: Optional[int],
    ) -> List[PatientPreview]:
        names: Dict[str, Optional[str]] = {}

        name_values = (
            data.iloc[:, name_idx].str.strip()
            if name_idx is not None
            else pd.Series([""] * len(data), index=data.index, dtype=object)
        )

        for pid, name in zip(patient_ids, name_values):
            if not pid:
                continue
            if names.get(pid) is None:
                names[pid] = name or None

        return [PatientPreview(id=pid, name=name) for pid, name in names.items()]

    # -------------------------------------------------
    # VISITS (BEST EFFORT)
    # -------------------------------------------------

    def _count_visits(
        self,
        data: pd.DataFrame,
        patient_ids: pd.Series,
        resolved: Dict[str, Optional[int]],
        headers: List[str],
        metadata: Dict[str, Any],
    ) -> int:
        visit_idx = resolved.get("visit_id")
        if visit_idx is not None:
            metadata["visit_column"] = headers[visit_idx].strip()
            visits = data.iloc[:, visit_idx].str.strip()
            return len(_distinct((p, v) for p, v in zip(patient_ids, visits) if v))

        date_idx = resolved.get("visit_date")
        if date_idx is None:
            return 0

        dates = data.iloc[:, date_idx].str.strip()
        parsed = {value: self._parse_date(value) for value in _distinct(dates) if value}

        if not any(parsed.values()):
            return 0

        metadata["visit_column"] = headers[date_idx].strip()
        return len(_distinct(
            (p, parsed[d]) for p, d in zip(patient_ids, dates) if d and parsed[d]
        ))

    @staticmethod
    def _parse_date(value: str):
        try:
            return date_parser.parse(value).date()
        except (ValueError, OverflowError):
            return None
