import pytest

from cliniscan.core.result import FileFormat
from cliniscan.detection import (
    detect_csv_delimiter,
    detect_format,
    is_csv_content,
    is_hl7_content,
    is_html_content,
    is_json_content,
)


# -------------------------------------------------
# Extension mapping
# -------------------------------------------------

@pytest.mark.parametrize(
    "filename, expected",
    [
        ("test.csv", FileFormat.CSV),
        ("test.json", FileFormat.JSON),
        ("test.hl7", FileFormat.HL7),
        ("test.html", FileFormat.HTML),
        ("test.htm", FileFormat.HTML),
        ("EXPORT.CSV", FileFormat.CSV),
    ],
)
def test_extension_wins_over_content(filename, expected):
    # content that sniffs as plain prose must not matter
    assert detect_format("plain text content", filename) == expected


def test_json_extension_wins_over_csv_looking_content():
    assert detect_format("col1,col2\nval1,val2", "data.json") == FileFormat.JSON


# -------------------------------------------------
# Content sniffing
# -------------------------------------------------

def test_csv_detected_by_content():
    assert detect_format("col1,col2\nval1,val2", "test.txt") == FileFormat.CSV


def test_json_detected_by_content():
    assert detect_format('{"test": "data"}', "test.txt") == FileFormat.JSON


def test_composition_json_resolves_to_json_by_priority():
    # valid JSON and a composition: json comes first in sniff order
    content = '{"resourceType": "Composition", "subject": {}}'
    assert detect_format(content, "upload") == FileFormat.JSON


def test_xml_clinical_document_detected_as_hl7():
    content = "<ClinicalDocument><title>x</title></ClinicalDocument>"
    assert detect_format(content, "upload.dat") == FileFormat.HL7


def test_html_detected_by_content():
    content = '<html><script>{"cda": "test"}</script></html>'
    assert detect_format(content, "test.txt") == FileFormat.HTML


def test_csv_wins_over_html_when_both_match():
    content = "name,comment\nA,<script>alert(1)</script>"
    assert detect_format(content, "upload") == FileFormat.CSV


def test_unsupported_returns_none():
    assert detect_format("plain text content", "test.unknown") is None


def test_no_filename_falls_back_to_sniffing():
    assert detect_format("a;b;c\n1;2;3", "") == FileFormat.CSV


# -------------------------------------------------
# Sniffers
# -------------------------------------------------

def test_is_csv_content():
    assert is_csv_content("col1,col2\nval1,val2")
    assert is_csv_content("a;b\n1;2")
    assert not is_csv_content("plain text")
    assert not is_csv_content("just one, ")


def test_is_csv_content_ignores_json_first_line():
    assert not is_csv_content('{"a": 1, "b": 2,\n "c": 3}')


def test_is_json_content():
    assert is_json_content('{"test": "data"}')
    assert is_json_content("[1, 2, 3]")
    assert not is_json_content("{invalid json}")
    assert not is_json_content('"just a string"')


def test_is_hl7_content():
    assert is_hl7_content('{"resourceType": "Composition"}')
    assert is_hl7_content("<ClinicalDocument>test</ClinicalDocument>")
    assert is_hl7_content(
        '{"resourceType": "Bundle", "entry": [{"resource": {"resourceType": "Composition"}}]}'
    )
    assert not is_hl7_content('{"test": "data"}')
    assert not is_hl7_content('{"resourceType": "Patient"}')


def test_is_html_content():
    assert is_html_content("<html><body>x</body></html>")
    assert is_html_content("<!DOCTYPE html><p>x</p>")
    assert is_html_content("<script>var CDA = {};</script>")
    assert is_html_content("<head></head><body></body>")
    assert not is_html_content("plain text")


# -------------------------------------------------
# Delimiter
# -------------------------------------------------

def test_delimiter_comma():
    assert detect_csv_delimiter("a,b,c\n1,2,3") == ","


def test_delimiter_semicolon():
    assert detect_csv_delimiter("a;b;c\n1;2;3") == ";"


def test_delimiter_tie_prefers_comma():
    assert detect_csv_delimiter("a,b;c") == ","
    assert detect_csv_delimiter("no separators") == ","


def test_delimiter_only_reads_header_line():
    assert detect_csv_delimiter("a;b\n1,2,3,4,5") == ";"


def test_single_line_of_prose_is_not_csv():
    assert not is_csv_content("Hello, this is a note")
    assert detect_format("Hello, this is a note", "note.txt") is None


def test_csv_sniffing_skips_comment_lines():
    content = "# Export date: 2024-03-01\nPatient ID,Age\nP1,40"
    assert detect_format(content, "upload") == FileFormat.CSV
    assert not is_csv_content("# Source: EHR\nPatient ID,Age")
