"""Timestamp rendering in the user's preferred date format."""

from datetime import date, datetime

DEFAULT_DATE_FORMAT = "yyyy-MM-dd"

# token ordering -> strftime pattern
DATE_FORMATS = {
    "yyyy-MM-dd": "%Y-%m-%d",
    "MM/dd/yyyy": "%m/%d/%Y",
    "dd/MM/yyyy": "%d/%m/%Y",
    "yyyy/MM/dd": "%Y/%m/%d",
    "MM-dd-yyyy": "%m-%d-%Y",
    "dd-MM-yyyy": "%d-%m-%Y",
    "dd.MM.yyyy": "%d.%m.%Y",
    "yyyy.MM.dd": "%Y.%m.%d",
    "yyyyMMdd": "%Y%m%d",
    "ddMMyyyy": "%d%m%Y",
    "MMddyyyy": "%m%d%Y",
}


def format_date(value: date, date_format: str | None) -> str:
    """Format a date with one of the supported patterns.

    Unknown or missing patterns fall back to ``yyyy-MM-dd``.
    """
    pattern = DATE_FORMATS.get(date_format or "", DATE_FORMATS[DEFAULT_DATE_FORMAT])
    # %Y is not zero-padded on every platform
    return value.strftime(pattern.replace("%Y", f"{value.year:04d}"))


def current_timestamp(date_format: str | None, now: datetime | None = None) -> str:
    """Render the current local date in the given pattern."""
    return format_date(now or datetime.now(), date_format)
