# Candidate separators in tie-break order: the first wins on equal counts
CSV_DELIMITERS = (",", ";")


def detect_csv_delimiter(content: str) -> str:
    """
    Pick the column separator from the header line by frequency.

    Only the first line is inspected; a tie (including zero of both)
    resolves to a comma.
    """
    header_line = content.split("\n", 1)[0] if content else ""

    best = CSV_DELIMITERS[0]
    best_count = 0

    for delimiter in CSV_DELIMITERS:
        count = header_line.count(delimiter)
        if count > best_count:
            best = delimiter
            best_count = count

    return best
