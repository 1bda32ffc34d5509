import datetime
import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

from . import solar
from .highlat import apply_fallback
from .hijri import to_hijri_date
from .methods import CalculationMethod, HighLatitudeRule, Madhab, for_method
from .render import format_local_time, tz_hours_for_day

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PrayerParams:
    latitude: float
    longitude: float
    method: CalculationMethod = CalculationMethod.MWL
    madhab: Madhab = Madhab.STANDARD
    high_latitude_rule: HighLatitudeRule = HighLatitudeRule.MIDDLE_OF_NIGHT
    timezone: Optional[str] = "UTC"
    adjustments: Mapping[str, int] = field(default_factory=dict)
    hijri_correction: int = 0
    city: str = ""


@dataclass(frozen=True)
class DailyTimes:
    fajr: str
    sunrise: str
    dhuhr: str
    asr: str
    maghrib: str
    isha: str

    def as_dict(self):
        return {
            "fajr": self.fajr,
            "sunrise": self.sunrise,
            "dhuhr": self.dhuhr,
            "asr": self.asr,
            "maghrib": self.maghrib,
            "isha": self.isha,
        }


@dataclass(frozen=True)
class PrayerMeta:
    calculation_method: str
    madhab: str
    adjustments: Optional[Mapping[str, int]] = None


@dataclass(frozen=True)
class DailyPrayerResult:
    date: datetime.date
    hijri_date: str
    city: str
    times: DailyTimes
    meta: PrayerMeta

    def as_dict(self):
        """JSON-ready shape used by the API and CLI."""
        return {
            "date": self.date.isoformat(),
            "hijriDate": self.hijri_date,
            "city": self.city,
            "times": self.times.as_dict(),
            "meta": {
                "calculationMethod": self.meta.calculation_method,
                "madhab": self.meta.madhab,
                "adjustments": dict(self.meta.adjustments) if self.meta.adjustments else None,
            },
        }


def _normalize_adjustments(adjustments):
    return {str(key).upper(): int(minutes) for key, minutes in (adjustments or {}).items()}


def compute_utc_times(jd, lat, lng, config, madhab, rule):
    """Raw UTC fractional hours for the six markers, high-latitude gaps already filled."""
    fajr = solar.time_for_angle(jd, lat, lng, config.fajr_angle, False)
    sunrise = solar.time_for_angle(jd, lat, lng, solar.RISE_SET_ANGLE, False)
    dhuhr = solar.solar_noon(jd, lng)
    asr = solar.asr_time(jd, lat, lng, madhab.shadow_ratio)
    maghrib = solar.time_for_angle(jd, lat, lng, solar.RISE_SET_ANGLE, True)
    maghrib += config.maghrib_adjustment / 60.0

    if config.is_isha_fixed_offset():
        isha = maghrib + config.isha_offset_minutes() / 60.0
    else:
        isha = solar.time_for_angle(jd, lat, lng, config.isha_angle, True)

    times = {
        "fajr": fajr,
        "sunrise": sunrise,
        "dhuhr": dhuhr,
        "asr": asr,
        "maghrib": maghrib,
        "isha": isha,
    }
    return apply_fallback(times, rule, config.fajr_angle, config.isha_angle)


def compute_prayer_times(day, params):
    method = CalculationMethod.parse(params.method)
    madhab = Madhab.parse(params.madhab)
    rule = HighLatitudeRule.parse(params.high_latitude_rule)
    config = for_method(method)

    jd = solar.julian_date_for(day)
    tz_hours = tz_hours_for_day(day, params.timezone)
    utc = compute_utc_times(jd, params.latitude, params.longitude, config, madhab, rule)
    logger.debug(f"[CALC] {day} {method.name}/{madhab.name} tz={params.timezone} offset={tz_hours:+.2f}h")

    adjustments = _normalize_adjustments(params.adjustments)

    def fmt(key, adjustable=True):
        minutes = adjustments.get(key.upper(), 0) if adjustable else 0
        return format_local_time(utc[key], tz_hours, minutes)

    times = DailyTimes(
        fajr=fmt("fajr"),
        sunrise=fmt("sunrise", adjustable=False),
        dhuhr=fmt("dhuhr"),
        asr=fmt("asr"),
        maghrib=fmt("maghrib"),
        isha=fmt("isha"),
    )
    meta = PrayerMeta(
        calculation_method=method.name,
        madhab=madhab.name,
        adjustments=MappingProxyType(dict(params.adjustments)) if params.adjustments else None,
    )
    return DailyPrayerResult(
        date=day,
        hijri_date=to_hijri_date(day, params.hijri_correction),
        city=params.city,
        times=times,
        meta=meta,
    )


def calculate_prayer_times(params, start, days=1):
    return [compute_prayer_times(start + datetime.timedelta(days=i), params) for i in range(days)]


def calculate_prayer_times_by_location(lat, lng, day, method=None, timezone=None, madhab=None):
    params = PrayerParams(
        latitude=lat,
        longitude=lng,
        method=CalculationMethod.parse(method),
        madhab=Madhab.parse(madhab),
        high_latitude_rule=HighLatitudeRule.MIDDLE_OF_NIGHT,
        timezone=timezone or "UTC",
    )
    return compute_prayer_times(day, params)


class PrayTimes:
    def __init__(self, params):
        self.params = params
        self.config = for_method(params.method)

    @property
    def method_name(self):
        return self.config.name

    def get_times(self, day):
        return compute_prayer_times(day, self.params)

    def get_range(self, start, days):
        return calculate_prayer_times(self.params, start, days)

    def get_utc_times(self, day):
        """Unformatted UTC hours, mainly for inspection and tests."""
        return compute_utc_times(
            solar.julian_date_for(day),
            self.params.latitude,
            self.params.longitude,
            self.config,
            Madhab.parse(self.params.madhab),
            HighLatitudeRule.parse(self.params.high_latitude_rule),
        )
