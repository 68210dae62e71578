import json

import pytest

from cliniscan.engine import AnalysisEngine


@pytest.fixture
def engine():
    """Fresh engine per test so config updates never leak."""
    return AnalysisEngine()


@pytest.fixture
def single_patient_csv():
    return "Patient ID,Gender,Age\nPAT001,M,45"


@pytest.fixture
def five_patient_csv():
    return (
        "Patient ID,Gender,Age\n"
        "PAT001,M,45\n"
        "PAT002,F,32\n"
        "PAT003,M,67\n"
        "PAT004,F,28\n"
        "PAT005,M,55"
    )


@pytest.fixture
def composition():
    """
    Composition with a subject and two sections (3 entries total).
    """
    return {
        "resourceType": "Composition",
        "title": "Visit summary",
        "subject": {"reference": "Patient/PAT001", "display": "Jane Doe"},
        "section": [
            {"title": "Vitals", "entry": [{"title": "Pulse"}, {"title": "Weight"}]},
            {"title": "Findings", "entry": [{"title": "Pain score"}]},
        ],
    }


@pytest.fixture
def survey_html(composition):
    payload = {"info": {"label": "PHQ-9", "PID": "PAT001"}, "cda": composition}
    return (
        "<!DOCTYPE html>\n<html><head><title>Survey</title></head><body>\n"
        "<script>\nvar CDA = " + json.dumps(payload) + ";\n</script>\n"
        "</body></html>"
    )
