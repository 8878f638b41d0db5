"""
Document numbers

Orders and reports get a human readable number built from the creation day
and a database sequence: PED-20250812-0042, REP-20250812-0007.
"""
from datetime import date, datetime
from typing import Union

ORDER_NUMBER_PREFIX = "PED"
REPORT_NUMBER_PREFIX = "REP"


def format_document_number(prefix: str, day: Union[date, datetime], sequence: int) -> str:
    """PREFIX-YYYYMMDD-NNNN (sequence zero padded to at least 4 digits)"""
    if sequence < 0:
        raise ValueError("sequence must be positive")
    return f"{prefix}-{day.strftime('%Y%m%d')}-{sequence:04d}"
