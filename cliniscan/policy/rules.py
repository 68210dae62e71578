from cliniscan.core.result import (
    IMPORT_TIME_15_PLUS,
    IMPORT_TIME_1_2_MINUTES,
    IMPORT_TIME_2_5_MINUTES,
    IMPORT_TIME_5_15_MINUTES,
    IMPORT_TIME_INSTANT,
    IMPORT_TIME_UNDER_MINUTE,
    ImportStrategy,
)

# (inclusive upper bound on patients, strategy); anything above -> INTERACTIVE
STRATEGY_BUCKETS = [
    (1, ImportStrategy.SINGLE_PATIENT),
    (9, ImportStrategy.BATCH_IMPORT),
]

# (inclusive upper bound on total records, label); anything above -> 15+
IMPORT_TIME_BUCKETS = [
    (0, IMPORT_TIME_INSTANT),
    (10, IMPORT_TIME_UNDER_MINUTE),
    (100, IMPORT_TIME_1_2_MINUTES),
    (1000, IMPORT_TIME_2_5_MINUTES),
    (10000, IMPORT_TIME_5_15_MINUTES),
]


def _check_count(name: str, value: int):
    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {value}")


def determine_strategy(patients_count: int) -> ImportStrategy:
    _check_count("patients_count", patients_count)

    for upper, strategy in STRATEGY_BUCKETS:
        if patients_count <= upper:
            return strategy

    return ImportStrategy.INTERACTIVE


def estimate_import_time(
    patients_count: int = 0,
    visits_count: int = 0,
    observations_count: int = 0,
) -> str:
    for name, value in (
        ("patients_count", patients_count),
        ("visits_count", visits_count),
        ("observations_count", observations_count),
    ):
        _check_count(name, value)

    total = patients_count + visits_count + observations_count

    for upper, label in IMPORT_TIME_BUCKETS:
        if total <= upper:
            return label

    return IMPORT_TIME_15_PLUS
