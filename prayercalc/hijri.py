"""Gregorian to Hijri conversion with the 30-year tabular (civil) Islamic calendar."""
from collections import namedtuple
from datetime import date, timedelta

# 1 Muharram 1 AH (16 July 622, Julian calendar) as a proleptic Gregorian ordinal
HIJRI_EPOCH_ORDINAL = date(622, 7, 19).toordinal()
DAYS_PER_CYCLE = 10631
YEARS_PER_CYCLE = 30
LEAP_YEARS = frozenset({2, 5, 7, 10, 13, 16, 18, 21, 24, 26, 29})
MONTH_NAMES = [
    "Muharram",
    "Safar",
    "Rabi' al-Awwal",
    "Rabi' al-Thani",
    "Jumada al-Ula",
    "Jumada al-Thani",
    "Rajab",
    "Sha'ban",
    "Ramadan",
    "Shawwal",
    "Dhu al-Qi'dah",
    "Dhu al-Hijjah",
]

HijriDate = namedtuple("HijriDate", ["year", "month", "day"])


def is_leap_year(year_in_cycle):
    return year_in_cycle in LEAP_YEARS


def _year_length(year_in_cycle):
    return 355 if is_leap_year(year_in_cycle) else 354


def _month_length(month, leap):
    if month == 12 and leap:
        return 30
    return 30 if month % 2 == 1 else 29


def to_hijri(day, correction=0):
    """Hijri (year, month, day) for a Gregorian date shifted by `correction` days."""
    shifted = day + timedelta(days=correction)
    cycle, remaining = divmod(shifted.toordinal() - HIJRI_EPOCH_ORDINAL, DAYS_PER_CYCLE)

    year_in_cycle = 1
    while remaining >= _year_length(year_in_cycle):
        remaining -= _year_length(year_in_cycle)
        year_in_cycle += 1

    leap = is_leap_year(year_in_cycle)
    month = 1
    while month < 12 and remaining >= _month_length(month, leap):
        remaining -= _month_length(month, leap)
        month += 1

    return HijriDate(cycle * YEARS_PER_CYCLE + year_in_cycle, month, remaining + 1)


def format_hijri(hijri):
    return f"{hijri.day} {MONTH_NAMES[hijri.month - 1]} {hijri.year}"


def to_hijri_date(day, correction=0):
    return format_hijri(to_hijri(day, correction))
