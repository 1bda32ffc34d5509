import json
import logging
import os

from .calc import PrayerParams
from .methods import ADJUSTABLE_PRAYERS, CalculationMethod, HighLatitudeRule, Madhab

logger = logging.getLogger(__name__)

CONFIG_DIR = os.path.join(os.path.expanduser("~"), ".config", "prayercalc")
CONFIG_PATH = os.environ.get("PRAYERCALC_CONFIG") or os.path.join(CONFIG_DIR, "config.json")

DEFAULT_CONFIG = {
    "location": "Tashkent",
    "locations": {
        "Tashkent": {"lat": 41.2995, "lng": 69.2401, "tz": "Asia/Tashkent", "label": "Tashkent, Uzbekistan"}
    },
    "method": "MWL",
    "madhab": "STANDARD",
    "high_latitude_rule": "MIDDLE_OF_NIGHT",
    "hijri_correction": 0,
    "adjustments": {
        "FAJR": 0,
        "DHUHR": 0,
        "ASR": 0,
        "MAGHRIB": 0,
        "ISHA": 0
    },
    "time_format": "24h"
}


def load_config(path=CONFIG_PATH):
    if not os.path.exists(path):
        logger.info(f"[CONFIG] Writing default config to {path}")
        save_config(DEFAULT_CONFIG, path)
        return json.loads(json.dumps(DEFAULT_CONFIG))
    with open(path, "r", encoding="utf-8") as f:
        config = json.load(f)
    if not isinstance(config, dict):
        raise ValueError(f"Config file must hold a JSON object: {path}")
    return config


def save_config(config, path=CONFIG_PATH):
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(config, f, indent=2)


def active_adjustments(config):
    """Non-zero manual offsets for the adjustable prayers, keyed upper-case."""
    adjustments = {}
    for key, minutes in config.get("adjustments", {}).items():
        key = key.upper()
        if key in ADJUSTABLE_PRAYERS and int(minutes):
            adjustments[key] = int(minutes)
    return adjustments


def get_location(config, location_key=None):
    location_key = location_key or config.get("location")
    loc = config.get("locations", {}).get(location_key)
    if not loc or loc.get("lat") is None or loc.get("lng") is None:
        raise ValueError(f"Location not configured: {location_key}")
    return location_key, loc


def params_from_config(config, location_key=None, loc=None):
    """PrayerParams from the saved preferences, for a saved location or an explicit `loc` dict."""
    if loc is None:
        location_key, loc = get_location(config, location_key)
    return PrayerParams(
        latitude=float(loc["lat"]),
        longitude=float(loc["lng"]),
        method=CalculationMethod.parse(config.get("method")),
        madhab=Madhab.parse(config.get("madhab")),
        high_latitude_rule=HighLatitudeRule.parse(config.get("high_latitude_rule")),
        timezone=loc.get("tz") or "UTC",
        adjustments=active_adjustments(config),
        hijri_correction=int(config.get("hijri_correction", 0)),
        city=loc.get("label") or location_key,
    )
