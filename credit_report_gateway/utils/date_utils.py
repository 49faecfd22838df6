"""Date manipulation utilities"""

from datetime import datetime


def format_positional_date(value: str) -> str:
    """Rewrite YYYYMMDD as YYYY-MM-DD; anything not 8 characters long passes through"""
    if not value or len(value) != 8:
        return value
    return f"{value[:4]}-{value[4:6]}-{value[6:]}"


def iso_date(moment: datetime) -> str:
    return moment.date().isoformat()


def clock_time(moment: datetime) -> str:
    return moment.strftime("%H:%M:%S")


def epoch_millis(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)
