import io
from typing import Dict, List

import pandas as pd
from pandas.errors import EmptyDataError, ParserError

from services.errors import ParseError, ValidationError

Record = Dict[str, str]


def _clean(value) -> str:
    if value is None or pd.isna(value):
        return ""
    return str(value).strip()


def parse_csv(buffer: bytes) -> List[Record]:
    """
    Turn CSV bytes into one record per data row.

    The first row names the fields. Header names and values are trimmed,
    empty values are left out of the record and rows with no values at all
    are skipped, so the remaining rows keep their original order.
    """
    try:
        df = pd.read_csv(
            io.BytesIO(buffer),
            header=None,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            encoding="utf-8-sig",
        )
    except EmptyDataError:
        df = pd.DataFrame()
    except (ParserError, UnicodeDecodeError) as e:
        raise ParseError(f"Malformed CSV file: {e}")

    # Fields a row never supplied come back as NaN; present but empty ones are ""
    short_rows = df.iloc[1:].isna().any(axis=1)
    if short_rows.any():
        raise ParseError(
            f"Malformed CSV file: record {int(short_rows.idxmax())} has fewer fields than the header"
        )

    records: List[Record] = []
    if df.shape[0] > 1:
        headers = [_clean(h) for h in df.iloc[0]]

        for row in df.iloc[1:].itertuples(index=False, name=None):
            record: Record = {}
            for header, value in zip(headers, row):
                value = _clean(value)
                # A nameless column cannot be mapped to a field
                if header and value:
                    record[header] = value
            if record:
                records.append(record)

    if not records:
        raise ValidationError("No valid records found in CSV file")
    return records
