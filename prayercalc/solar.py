"""Solar position formulas (NOAA solar calculator) used by the prayer time engine.

Times are fractional hours from midnight UTC. An angle the sun never reaches is
reported as NaN rather than raised, so callers can repair it locally.
"""
import math

J2000 = 2451545.0
DAYS_PER_CENTURY = 36525.0
RISE_SET_ANGLE = 0.833


def _dtr(d):
    return (d * math.pi) / 180.0


def _rtd(r):
    return (r * 180.0) / math.pi


def julian_date(y, m, d):
    if m <= 2:
        y -= 1
        m += 12
    a = y // 100
    b = 2 - a + a // 4
    return math.floor(365.25 * (y + 4716)) + math.floor(30.6001 * (m + 1)) + d + b - 1524.5


def julian_date_for(day):
    return julian_date(day.year, day.month, day.day)


def julian_century(jd):
    return (jd - J2000) / DAYS_PER_CENTURY


def sun_mean_longitude(t):
    return (280.46646 + t * (36000.76983 + 0.0003032 * t)) % 360.0


def sun_mean_anomaly(t):
    return 357.52911 + t * (35999.05029 - 0.0001537 * t)


def earth_orbit_eccentricity(t):
    return 0.016708634 - t * (0.000042037 + 0.0000001267 * t)


def sun_equation_of_center(t):
    m = _dtr(sun_mean_anomaly(t))
    return (
        math.sin(m) * (1.914602 - t * (0.004817 + 0.000014 * t))
        + math.sin(2 * m) * (0.019993 - 0.000101 * t)
        + math.sin(3 * m) * 0.000289
    )


def sun_true_longitude(t):
    return sun_mean_longitude(t) + sun_equation_of_center(t)


def _omega(t):
    return 125.04 - 1934.136 * t


def sun_apparent_longitude(t):
    # nutation and aberration
    return sun_true_longitude(t) - 0.00569 - 0.00478 * math.sin(_dtr(_omega(t)))


def mean_obliquity_of_ecliptic(t):
    seconds = 21.448 - t * (46.8150 + t * (0.00059 - t * 0.001813))
    return 23.0 + (26.0 + seconds / 60.0) / 60.0


def obliquity_correction(t):
    return mean_obliquity_of_ecliptic(t) + 0.00256 * math.cos(_dtr(_omega(t)))


def sun_declination(t):
    e = _dtr(obliquity_correction(t))
    lam = _dtr(sun_apparent_longitude(t))
    return _rtd(math.asin(math.sin(e) * math.sin(lam)))


def equation_of_time(t):
    """Equation of time in minutes."""
    epsilon = _dtr(obliquity_correction(t))
    l0 = _dtr(sun_mean_longitude(t))
    e = earth_orbit_eccentricity(t)
    m = _dtr(sun_mean_anomaly(t))

    y = math.tan(epsilon / 2.0) ** 2

    eq_time = (
        y * math.sin(2 * l0)
        - 2 * e * math.sin(m)
        + 4 * e * y * math.sin(m) * math.cos(2 * l0)
        - 0.5 * y * y * math.sin(4 * l0)
        - 1.25 * e * e * math.sin(2 * m)
    )
    return _rtd(eq_time) * 4.0


def hour_angle(lat, decl, angle):
    """Hour angle in degrees for the sun `angle` degrees below the horizon.

    Returns NaN when the sun never gets there at this latitude and declination.
    """
    lat_r = _dtr(lat)
    decl_r = _dtr(decl)
    cos_ha = (math.sin(_dtr(-angle)) - math.sin(lat_r) * math.sin(decl_r)) / (
        math.cos(lat_r) * math.cos(decl_r)
    )
    if cos_ha < -1.0 or cos_ha > 1.0:
        return math.nan
    return _rtd(math.acos(cos_ha))


def _noon(lng, eq_time):
    return (720 - 4 * lng - eq_time) / 60.0


def solar_noon(jd, lng):
    return _noon(lng, equation_of_time(julian_century(jd)))


def time_for_angle(jd, lat, lng, angle, after_noon):
    t = julian_century(jd)
    ha = hour_angle(lat, sun_declination(t), angle)
    if math.isnan(ha):
        return math.nan
    noon = _noon(lng, equation_of_time(t))
    offset = ha * 4.0 / 60.0
    return noon + offset if after_noon else noon - offset


def asr_altitude(lat, decl, shadow_ratio):
    return _rtd(math.atan(1.0 / (shadow_ratio + math.tan(abs(_dtr(lat - decl))))))


def asr_time(jd, lat, lng, shadow_ratio):
    t = julian_century(jd)
    decl = sun_declination(t)
    # the Asr altitude is above the horizon, hour_angle expects a depression
    ha = hour_angle(lat, decl, -asr_altitude(lat, decl, shadow_ratio))
    if math.isnan(ha):
        return math.nan
    return _noon(lng, equation_of_time(t)) + ha * 4.0 / 60.0
