import pytest

from cliniscan.analyzers.csv_analyzer import (
    LAYOUT_CONDENSED,
    LAYOUT_SINGLE,
    LAYOUT_TWO_ROW,
    NO_PATIENT_COLUMN_WARNING,
    CsvAnalyzer,
    detect_header_layout,
    parse_comment_metadata,
)


@pytest.fixture
def analyzer():
    return CsvAnalyzer()


# -------------------------------------------------
# Counting
# -------------------------------------------------

def test_single_patient(analyzer, single_patient_csv):
    outcome = analyzer.analyze(single_patient_csv, "test.csv")

    assert outcome.success
    assert outcome.patients_count == 1
    assert outcome.observations_count == 1
    assert [p.id for p in outcome.patients] == ["PAT001"]
    assert outcome.metadata["patient_column"] == "Patient ID"


def test_five_patients(analyzer, five_patient_csv):
    outcome = analyzer.analyze(five_patient_csv, "test.csv")

    assert outcome.patients_count == 5
    assert outcome.observations_count == 5
    assert outcome.warnings == ()


def test_duplicate_patient_ids_are_counted_once(analyzer):
    content = "Patient ID,Value\nP1,1\nP1,2\n P1 ,3\nP2,4"
    outcome = analyzer.analyze(content, "test.csv")

    assert outcome.patients_count == 2
    assert outcome.observations_count == 4


def test_patient_names_are_previewed(analyzer):
    content = "Patient ID,Patient Name\nP1,Jane Doe\nP2,"
    outcome = analyzer.analyze(content, "test.csv")

    previews = {p.id: p.name for p in outcome.patients}
    assert previews == {"P1": "Jane Doe", "P2": None}


def test_semicolon_delimited(analyzer):
    content = "Patient ID;Age\nP1;40\nP2;50"
    outcome = analyzer.analyze(content, "test.csv")

    assert outcome.metadata["delimiter"] == ";"
    assert outcome.patients_count == 2


def test_no_patient_column_warns(analyzer):
    outcome = analyzer.analyze("col1,col2\nval1,val2", "test.csv")

    assert outcome.success
    assert outcome.patients_count == 0
    assert outcome.observations_count == 1
    assert NO_PATIENT_COLUMN_WARNING in outcome.warnings


# -------------------------------------------------
# Visits (best effort)
# -------------------------------------------------

def test_visits_from_visit_column(analyzer):
    content = (
        "Patient ID,Encounter ID,Code\n"
        "P1,E1,a\n"
        "P1,E1,b\n"
        "P1,E2,c\n"
        "P2,E1,d"
    )
    outcome = analyzer.analyze(content, "test.csv")

    assert outcome.visits_count == 3
    assert outcome.metadata["visit_column"] == "Encounter ID"


def test_visits_from_dates_normalize_formats(analyzer):
    content = (
        "Patient ID,Visit date,Value\n"
        "P1,2024-01-01,5\n"
        "P1,Jan 1 2024,6\n"
        "P1,2024-02-01,7\n"
        "P2,2024-01-01,8"
    )
    outcome = analyzer.analyze(content, "test.csv")

    assert outcome.visits_count == 3


def test_birth_date_is_not_a_visit(analyzer):
    content = "Patient ID,Birth date\nP1,1980-01-01\nP2,1975-05-05"
    outcome = analyzer.analyze(content, "test.csv")

    assert outcome.visits_count == 0
    assert "visit_column" not in outcome.metadata


def test_unparseable_dates_give_zero_visits(analyzer):
    content = "Patient ID,Date\nP1,soon\nP2,later"
    outcome = analyzer.analyze(content, "test.csv")

    assert outcome.success
    assert outcome.visits_count == 0


# -------------------------------------------------
# Header layouts
# -------------------------------------------------

def test_two_row_header_layout(analyzer):
    content = (
        "Patient,Sex,Birth date\n"
        "PATIENT_CD,SEX_CD,BIRTH_DATE\n"
        "P1,M,1980-01-01\n"
        "P2,F,1975-05-05"
    )
    outcome = analyzer.analyze(content, "test.csv")

    assert outcome.metadata["header_layout"] == LAYOUT_TWO_ROW
    assert outcome.observations_count == 2
    assert outcome.patients_count == 2


def test_condensed_header_layout(analyzer):
    content = (
        "FIELD_NAME,PATIENT_CD,ENCOUNTER_NUM,START_DATE\n"
        "VALTYPE_CD,T,T,D\n"
        "UNIT_CD,,,\n"
        "NAME_CHAR,Patient,Visit,Start\n"
        ",P1,V1,2024-01-01\n"
        ",P1,V2,2024-02-01\n"
        ",P2,V1,2024-01-01"
    )
    outcome = analyzer.analyze(content, "test.csv")

    assert outcome.metadata["header_layout"] == LAYOUT_CONDENSED
    assert outcome.observations_count == 3
    assert outcome.patients_count == 2
    assert outcome.visits_count == 3


def test_detect_header_layout_single():
    assert detect_header_layout([["a", "b"], ["1", "2"]]) == (LAYOUT_SINGLE, 1)
    assert detect_header_layout([]) == (LAYOUT_SINGLE, 0)


def test_detect_header_layout_prefixed_codes():
    rows = [["Glucose", "Sodium"], ["LID: 2345-7", "LID: 2951-2"], ["5.1", "140"]]
    assert detect_header_layout(rows) == (LAYOUT_TWO_ROW, 2)


# -------------------------------------------------
# Comments
# -------------------------------------------------

def test_comment_lines_become_metadata(analyzer):
    content = (
        "# Export date: 2024-03-01\n"
        "# Source: Clinic EHR\n"
        "Patient ID,Age\n"
        "P1,40"
    )
    outcome = analyzer.analyze(content, "export.csv")

    assert outcome.metadata["export_date"] == "2024-03-01"
    assert outcome.metadata["source"] == "Clinic EHR"
    assert outcome.observations_count == 1


def test_parse_comment_metadata_ignores_unknown_keys():
    assert parse_comment_metadata(["# Hello world", "# Owner: someone"]) == {}


# -------------------------------------------------
# Leniency: CSV never fails
# -------------------------------------------------

def test_empty_content_warns(analyzer):
    outcome = analyzer.analyze("", "empty.csv")

    assert outcome.success
    assert outcome.observations_count == 0
    assert outcome.warnings


def test_single_column_warns(analyzer):
    outcome = analyzer.analyze("just one line of text", "notes.csv")

    assert outcome.success
    assert outcome.observations_count == 0
    assert any("one column" in w for w in outcome.warnings)
    assert any("no data rows" in w for w in outcome.warnings)


def test_malformed_rows_are_skipped_with_warning(analyzer):
    content = "Patient ID,Age\nP1,40\nP2,50,extra,fields"
    outcome = analyzer.analyze(content, "test.csv")

    assert outcome.success
    assert outcome.patients_count == 1
    assert any("malformed" in w for w in outcome.warnings)


def test_short_rows_are_padded(analyzer):
    content = "Patient ID,Age,Sex\nP1,40\nP2"
    outcome = analyzer.analyze(content, "test.csv")

    assert outcome.success
    assert outcome.patients_count == 2


@pytest.mark.parametrize(
    "content",
    [
        "Patient ID,Visit ID\nPAT_001,VIS_001\nPAT_002,VIS_002\nPAT_003,VIS_003",
        "Patient,Sex\nDEMO_PATIENT_01,SEX_F\nDEMO_PATIENT_02,SEX_M\nDEMO_PATIENT_03,SEX_F",
    ],
)
def test_underscore_values_are_data_not_codes(analyzer, content):
    outcome = analyzer.analyze(content, "test.csv")

    assert outcome.metadata["header_layout"] == LAYOUT_SINGLE
    assert outcome.patients_count == 3
    assert outcome.observations_count == 3


def test_quoted_multiline_field_is_one_record(analyzer):
    content = 'Patient ID,Note\nP1,"line one\nline two"\nP2,ok'
    outcome = analyzer.analyze(content, "test.csv")

    assert outcome.observations_count == 2
    assert outcome.patients_count == 2
    assert not any("malformed" in w for w in outcome.warnings)


def test_skipped_rows_are_not_observations(analyzer):
    content = "Patient ID,Age\nP1,40\nP2,50,EXTRA\nP3,60"
    outcome = analyzer.analyze(content, "test.csv")

    assert outcome.patients_count == 2
    assert outcome.observations_count == 2
    assert "1 malformed row(s) could not be parsed and were ignored" in outcome.warnings


def test_columns_metadata_is_immutable(analyzer, single_patient_csv):
    outcome = analyzer.analyze(single_patient_csv, "test.csv")
    assert outcome.metadata["columns"] == ("Patient ID", "Gender", "Age")
