import dataclasses
import json
import re
from datetime import date

import pytest

from prayercalc.calc import (
    PrayerParams,
    PrayTimes,
    calculate_prayer_times,
    calculate_prayer_times_by_location,
    compute_prayer_times,
)
from prayercalc.methods import CalculationMethod, Madhab

TIME_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")
FEB_24 = date(2026, 2, 24)


def _tashkent(**overrides):
    fields = dict(
        latitude=41.2995,
        longitude=69.2401,
        method=CalculationMethod.MWL,
        madhab=Madhab.STANDARD,
        timezone="Asia/Tashkent",
        city="Tashkent",
    )
    fields.update(overrides)
    return PrayerParams(**fields)


def _minutes(hhmm):
    hours, minutes = hhmm.split(":")
    return int(hours) * 60 + int(minutes)


def test_tashkent_scenario():
    result = compute_prayer_times(FEB_24, _tashkent())
    assert result.times.as_dict() == {
        "fajr": "05:34",
        "sunrise": "07:06",
        "dhuhr": "12:36",
        "asr": "15:38",
        "maghrib": "18:07",
        "isha": "19:34",
    }
    assert result.hijri_date == "7 Ramadan 1447"
    assert result.city == "Tashkent"
    assert result.date == FEB_24


def test_tashkent_hanafi_asr():
    assert compute_prayer_times(FEB_24, _tashkent(madhab=Madhab.HANAFI)).times.asr == "16:24"


def test_times_are_ordered_through_the_day():
    times = compute_prayer_times(FEB_24, _tashkent()).times
    order = [times.fajr, times.sunrise, times.dhuhr, times.asr, times.maghrib, times.isha]
    assert order == sorted(order)


def test_hanafi_asr_is_later():
    standard = compute_prayer_times(FEB_24, _tashkent())
    hanafi = compute_prayer_times(FEB_24, _tashkent(madhab=Madhab.HANAFI))
    assert hanafi.times.asr > standard.times.asr
    assert hanafi.meta.madhab == "HANAFI"
    assert dataclasses.replace(hanafi.times, asr=standard.times.asr) == standard.times


def test_fajr_adjustment_only_moves_fajr():
    base = compute_prayer_times(FEB_24, _tashkent())
    adjusted = compute_prayer_times(FEB_24, _tashkent(adjustments={"FAJR": -3}))
    assert _minutes(adjusted.times.fajr) - _minutes(base.times.fajr) == -3
    assert dataclasses.replace(adjusted.times, fajr=base.times.fajr) == base.times
    assert dict(adjusted.meta.adjustments) == {"FAJR": -3}


def test_sunrise_is_never_adjusted():
    base = compute_prayer_times(FEB_24, _tashkent())
    adjusted = compute_prayer_times(FEB_24, _tashkent(adjustments={"SUNRISE": 10}))
    assert adjusted.times == base.times
    assert dict(adjusted.meta.adjustments) == {"SUNRISE": 10}


def test_adjustment_keys_are_case_insensitive():
    base = compute_prayer_times(FEB_24, _tashkent())
    adjusted = compute_prayer_times(FEB_24, _tashkent(adjustments={"isha": 5, "Dhuhr": 2}))
    assert _minutes(adjusted.times.isha) - _minutes(base.times.isha) == 5
    assert _minutes(adjusted.times.dhuhr) - _minutes(base.times.dhuhr) == 2


def test_meta_without_adjustments():
    result = compute_prayer_times(FEB_24, _tashkent())
    assert result.meta.calculation_method == "MWL"
    assert result.meta.madhab == "STANDARD"
    assert result.meta.adjustments is None


def test_fixed_offset_isha_is_ninety_minutes_after_maghrib():
    for method in (CalculationMethod.UMM_AL_QURA, CalculationMethod.QATAR):
        times = compute_prayer_times(FEB_24, _tashkent(method=method)).times
        assert _minutes(times.isha) - _minutes(times.maghrib) == 90


def test_mbouz_maghrib_three_minutes_after_sunset():
    mwl = compute_prayer_times(FEB_24, _tashkent()).times
    mbouz = compute_prayer_times(FEB_24, _tashkent(method=CalculationMethod.MBOUZ)).times
    assert _minutes(mbouz.maghrib) - _minutes(mwl.maghrib) == 3
    assert mbouz.sunrise == mwl.sunrise


def test_by_location_defaults():
    result = calculate_prayer_times_by_location(41.2995, 69.2401, date(2026, 6, 15))
    assert result.meta.calculation_method == "MWL"
    assert result.meta.madhab == "STANDARD"
    assert result.date == date(2026, 6, 15)
    assert result.city == ""
    # no timezone means UTC
    assert result.times.dhuhr.startswith("07:")


def test_by_location_accepts_names():
    result = calculate_prayer_times_by_location(
        21.4225, 39.8262, FEB_24, method="UMM_AL_QURA", timezone="Asia/Riyadh", madhab="hanafi"
    )
    assert result.meta.calculation_method == "UMM_AL_QURA"
    assert result.meta.madhab == "HANAFI"


def test_invalid_timezone_falls_back_to_utc():
    utc = compute_prayer_times(FEB_24, _tashkent(timezone="UTC"))
    bogus = compute_prayer_times(FEB_24, _tashkent(timezone="Mars/Olympus_Mons"))
    assert bogus.times == utc.times


def test_unknown_method_behaves_like_mwl():
    mwl = compute_prayer_times(FEB_24, _tashkent())
    unknown = compute_prayer_times(FEB_24, _tashkent(method="TEHRAN"))
    assert unknown.times == mwl.times
    assert unknown.meta.calculation_method == "MWL"


def test_range_returns_consecutive_days():
    results = calculate_prayer_times(_tashkent(), date(2026, 2, 27), 3)
    assert [r.date for r in results] == [date(2026, 2, 27), date(2026, 2, 28), date(2026, 3, 1)]


def test_pray_times_wrapper():
    pray = PrayTimes(_tashkent(method=CalculationMethod.EGYPT))
    assert pray.method_name == "Egyptian General Authority of Survey"
    assert pray.get_times(FEB_24) == compute_prayer_times(FEB_24, pray.params)
    assert len(pray.get_range(FEB_24, 7)) == 7


def test_results_are_deterministic_and_frozen():
    first = compute_prayer_times(FEB_24, _tashkent())
    second = compute_prayer_times(FEB_24, _tashkent())
    assert first == second
    with pytest.raises(dataclasses.FrozenInstanceError):
        first.times.fajr = "00:00"


def test_as_dict_shape():
    result = compute_prayer_times(FEB_24, _tashkent(adjustments={"ISHA": -3}))
    payload = json.loads(json.dumps(result.as_dict()))
    assert payload["date"] == "2026-02-24"
    assert payload["hijriDate"] == "7 Ramadan 1447"
    assert payload["city"] == "Tashkent"
    assert set(payload["times"]) == {"fajr", "sunrise", "dhuhr", "asr", "maghrib", "isha"}
    assert payload["meta"] == {"calculationMethod": "MWL", "madhab": "STANDARD", "adjustments": {"ISHA": -3}}


def test_hijri_correction_applies():
    result = compute_prayer_times(FEB_24, _tashkent(hijri_correction=-1))
    assert result.hijri_date == "6 Ramadan 1447"


@pytest.mark.parametrize("method", list(CalculationMethod))
@pytest.mark.parametrize("lat", [-47.5, -33.9, -6.2, 0.0, 21.4, 41.3, 47.5])
@pytest.mark.parametrize("day", [date(2024, 3, 20), date(2024, 6, 21), date(2024, 12, 21)])
def test_non_polar_latitudes_always_resolve(method, lat, day):
    params = PrayerParams(latitude=lat, longitude=12.5, method=method, timezone="UTC")
    times = compute_prayer_times(day, params).times.as_dict()
    for value in times.values():
        assert TIME_RE.match(value), value
