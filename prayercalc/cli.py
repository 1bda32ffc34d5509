import argparse
import json
import logging
import sys
from dataclasses import replace
from datetime import date, datetime

from .calc import PrayTimes
from .config import CONFIG_PATH, load_config, params_from_config, save_config
from .methods import ADJUSTABLE_PRAYERS, METHODS, CalculationMethod, HighLatitudeRule, Madhab
from .render import get_timezone, render_table

MAX_DAYS = 30
MAX_HIJRI_CORRECTION = 2


def setup_logging(verbose=False):
    level = logging.DEBUG if verbose else logging.WARNING
    logger = logging.getLogger()
    logger.setLevel(level)
    if logger.hasHandlers():
        logger.handlers.clear()
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(asctime)s | %(levelname)s | %(message)s"))
    logger.addHandler(handler)


def _check_coordinates(lat, lng):
    if not -90.0 <= lat <= 90.0:
        raise ValueError(f"Latitude out of range [-90, 90]: {lat}")
    if not -180.0 <= lng <= 180.0:
        raise ValueError(f"Longitude out of range [-180, 180]: {lng}")


def _parse_choice(enum_cls, value, what):
    member = enum_cls.lookup(value)
    if member is None:
        raise ValueError(f"Unknown {what}: {value}")
    return member


def _resolve_params(config, args):
    loc = None
    if args.lat is not None or args.lng is not None:
        if args.lat is None or args.lng is None:
            raise ValueError("--lat and --lng must be given together")
        if args.location:
            raise ValueError("--location cannot be combined with --lat/--lng")
        loc = {
            "lat": args.lat,
            "lng": args.lng,
            "tz": args.tz or "UTC",
            "label": f"{args.lat:.4f}, {args.lng:.4f}"
        }

    params = params_from_config(config, args.location, loc)
    _check_coordinates(params.latitude, params.longitude)

    overrides = {}
    if args.method:
        overrides["method"] = _parse_choice(CalculationMethod, args.method, "method")
    if args.madhab:
        overrides["madhab"] = _parse_choice(Madhab, args.madhab, "madhab")
    if args.high_lat:
        overrides["high_latitude_rule"] = _parse_choice(HighLatitudeRule, args.high_lat, "high latitude rule")
    if args.tz:
        overrides["timezone"] = args.tz
    if args.hijri_correction is not None:
        overrides["hijri_correction"] = args.hijri_correction
    correction = overrides.get("hijri_correction", params.hijri_correction)
    if abs(correction) > MAX_HIJRI_CORRECTION:
        raise ValueError(f"Hijri correction out of range [-2, 2]: {correction}")
    return replace(params, **overrides)


def show_times(config, args):
    if not 1 <= args.days <= MAX_DAYS:
        raise ValueError(f"Days out of range [1, {MAX_DAYS}]: {args.days}")
    params = _resolve_params(config, args)
    start = args.date
    if start is None:
        # today in the location's own timezone
        start = datetime.now(get_timezone(params.timezone)).date()

    results = PrayTimes(params).get_range(start, args.days)

    if args.json:
        payload = [r.as_dict() for r in results]
        print(json.dumps(payload if args.days > 1 else payload[0], ensure_ascii=False, indent=2))
        return 0

    format_24h = not args.twelve_hour and config.get("time_format", "24h") == "24h"
    print("\n\n".join(render_table(r, format_24h) for r in results))
    return 0


def handle_cli(args):
    config = load_config(args.config)

    if args.list_methods:
        for method, conf in METHODS.items():
            isha = f"{conf.isha_offset_minutes()} min" if conf.is_isha_fixed_offset() else f"{conf.isha_angle}"
            print(f"{method.name}: {conf.name} (Fajr {conf.fajr_angle}, Isha {isha})")
        return 0

    if args.list_locations:
        for name, loc in config.get("locations", {}).items():
            label = loc.get("label") or name
            tz = loc.get("tz", "UTC")
            print(f"{name}: {label} ({loc.get('lat')}, {loc.get('lng')}) [{tz}]")
        return 0

    if args.use_location:
        if args.use_location not in config.get("locations", {}):
            raise ValueError(f"Unknown location: {args.use_location}")
        config["location"] = args.use_location
        save_config(config, args.config)
        return 0

    if args.set_method:
        config["method"] = _parse_choice(CalculationMethod, args.set_method, "method").name
        save_config(config, args.config)
        return 0

    if args.set_madhab:
        config["madhab"] = _parse_choice(Madhab, args.set_madhab, "madhab").name
        save_config(config, args.config)
        return 0

    if args.set_offset:
        prayer, minutes = args.set_offset
        prayer_key = prayer.upper()
        if prayer_key not in ADJUSTABLE_PRAYERS:
            raise ValueError(f"Unknown prayer for offset: {prayer}")
        config.setdefault("adjustments", {})[prayer_key] = int(minutes)
        save_config(config, args.config)
        return 0

    if args.set_location:
        if args.lat is None or args.lng is None:
            raise ValueError("--set-location requires --lat and --lng")
        lat, lng = float(args.lat), float(args.lng)
        _check_coordinates(lat, lng)
        config.setdefault("locations", {})[args.set_location] = {
            "lat": lat,
            "lng": lng,
            "tz": args.tz or "UTC",
            "label": args.set_location
        }
        config["location"] = args.set_location
        save_config(config, args.config)
        return 0

    return show_times(config, args)


def build_arg_parser():
    parser = argparse.ArgumentParser(description="Prayer times calculator")
    parser.add_argument("--config", default=CONFIG_PATH, help="Path to the JSON config file")
    parser.add_argument("--date", type=date.fromisoformat, help="Date as YYYY-MM-DD (defaults to today)")
    parser.add_argument("--days", type=int, default=1, help="Number of consecutive days (1-30)")
    parser.add_argument("--location", help="Saved location to use instead of the active one")
    parser.add_argument("--lat", type=float, help="Latitude (with --lng, overrides the saved location)")
    parser.add_argument("--lng", type=float, help="Longitude (with --lat)")
    parser.add_argument("--tz", help="IANA time zone, e.g. Asia/Tashkent")
    parser.add_argument("--method", help="Calculation method for this run")
    parser.add_argument("--madhab", help="STANDARD or HANAFI for this run")
    parser.add_argument("--high-lat", help="MIDDLE_OF_NIGHT, ONE_SEVENTH or ANGLE_BASED")
    parser.add_argument("--hijri-correction", type=int, help="Hijri day correction (-2 to 2)")
    parser.add_argument("--json", action="store_true", help="Output JSON")
    parser.add_argument("--12h", dest="twelve_hour", action="store_true", help="Use 12-hour clock")
    parser.add_argument("--verbose", action="store_true", help="Debug logging on stderr")
    parser.add_argument("--list-methods", action="store_true", help="List calculation methods")
    parser.add_argument("--list-locations", action="store_true", help="List locations from config")
    parser.add_argument("--use-location", help="Switch the active saved location")
    parser.add_argument("--set-location", help="Add or update a location (needs --lat/--lng) and make it active")
    parser.add_argument("--set-method", help="Save the default calculation method")
    parser.add_argument("--set-madhab", help="Save the default madhab")
    parser.add_argument("--set-offset", nargs=2, metavar=("PRAYER", "MIN"), help="Save a prayer offset in minutes")
    return parser


def main(argv=None):
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    try:
        return handle_cli(args)
    except (ValueError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
