"""Night-portion estimates for Fajr and Isha when the sun never reaches the method angle."""
import logging
import math

from .methods import HighLatitudeRule

logger = logging.getLogger(__name__)

DEFAULT_NIGHT_HOURS = 12.0


def night_duration(sunrise, maghrib):
    if math.isnan(sunrise) or math.isnan(maghrib):
        return DEFAULT_NIGHT_HOURS
    return 24.0 - (maghrib - sunrise)


def night_portion(rule, angle):
    if rule is HighLatitudeRule.ONE_SEVENTH:
        return 1.0 / 7.0
    if rule is HighLatitudeRule.ANGLE_BASED:
        return angle / 60.0
    return 0.5


def apply_fallback(times, rule, fajr_angle, isha_angle):
    """Fill a NaN fajr/isha in `times` (UTC hours keyed by prayer) and return a new dict."""
    fajr = times["fajr"]
    isha = times["isha"]
    if not (math.isnan(fajr) or math.isnan(isha)):
        return dict(times)

    night = night_duration(times["sunrise"], times["maghrib"])
    adjusted = dict(times)
    if math.isnan(fajr):
        adjusted["fajr"] = times["sunrise"] - night_portion(rule, fajr_angle) * night
        logger.debug(f"[HIGHLAT] Fajr unreachable, {rule.name} estimate over {night:.3f}h night")
    if math.isnan(isha):
        adjusted["isha"] = times["maghrib"] + night_portion(rule, isha_angle) * night
        logger.debug(f"[HIGHLAT] Isha unreachable, {rule.name} estimate over {night:.3f}h night")
    return adjusted
