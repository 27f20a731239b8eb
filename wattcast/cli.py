"""wattcast CLI: forecast from a readings file or serve the HTTP API."""

import argparse
import json
import logging
import random
import sys

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _setup_logging(verbose=False, quiet=False):
    level = logging.INFO
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")


def _init():
    """Initialize config and data store from environment."""
    from wattcast.engine.config import AppConfig
    from wattcast.engine.storage.data_store import DataStore

    config = AppConfig.from_env()
    return config, DataStore(config.paths)


def format_watts(watts):
    if watts >= 1000:
        return f"{watts / 1000:.2f} kW"
    return f"{watts:.0f} W"


def _print_table(result):
    summary = result["daily_summary"]
    source = "historical readings" if result["is_based_on_real_data"] else "typical household pattern"
    print(f"Forecast from {result['data_points']} readings ({source})")
    print(f"  Predicted daily usage: {summary['total_kwh']:.2f} kWh")
    print(f"  Predicted peak power:  {format_watts(summary['peak_wattage'])}")
    print(f"  Average confidence:    {round(summary['average_confidence'] * 100)}%")
    print()
    print(f"  {'time':<17} {'predicted':>10} {'range':>21}  confidence")
    for p in result["hourly_predictions"]:
        band = f"{format_watts(p['lower_bound'])} - {format_watts(p['upper_bound'])}"
        print(
            f"  {p['time'][:16]:<17} {format_watts(p['predicted_wattage']):>10} {band:>21}  "
            f"{round(p['confidence'] * 100)}% ({p['confidence_label']})"
        )


def cmd_forecast(input_path=None, output_path=None, window="24h", seed=None,
                 json_output=False, include_history=False):
    """Forecast the next 24 hours from a readings file.

    Returns the forecast dict, or None when the readings file is unusable.
    """
    from wattcast.engine.forecast import generate_forecast, slice_window
    from wattcast.engine.storage.data_store import ReadingsFormatError

    config, store = _init()
    try:
        readings = store.load_readings(input_path)
    except (json.JSONDecodeError, ReadingsFormatError) as e:
        logger.error(f"Cannot read readings: {e}")
        return None

    if seed is None:
        seed = config.forecast.seed
    forecast = generate_forecast(
        readings,
        rng=random.Random(seed),
        config=config.forecast,
        include_history=include_history,
    )
    result = forecast.to_dict()
    result["window"] = window
    result["hourly_predictions"] = slice_window(result["hourly_predictions"], window)

    if output_path:
        path = store.save_forecast(result, output_path)
        logger.info(f"Forecast saved: {path}")

    if json_output:
        print(json.dumps(result, indent=2))
    else:
        _print_table(result)
    return result


def cmd_serve(host=None, port=None):
    """Start the forecast API with uvicorn."""
    import uvicorn

    from wattcast.engine.config import AppConfig
    from wattcast.hub.api import create_api

    config = AppConfig.from_env()
    host = host or config.server.host
    port = port or config.server.port
    logger.info(f"Serving wattcast API on http://{host}:{port}")
    uvicorn.run(create_api(config), host=host, port=port, log_config=None)


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="wattcast",
        description="wattcast: smart-home energy usage forecasting",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable DEBUG logging")
    parser.add_argument("--quiet", action="store_true", help="Only show WARNING and above")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    forecast_parser = subparsers.add_parser("forecast", help="Forecast the next 24 hours from readings")
    forecast_parser.add_argument("--input", dest="input_path", default=None,
                                 help="Readings JSON file (default: $WATTCAST_DATA_DIR/readings.json)")
    forecast_parser.add_argument("--output", dest="output_path", default=None, help="Write forecast JSON here")
    forecast_parser.add_argument("--window", choices=["6h", "12h", "24h"], default="24h",
                                 help="Hours to show (default: 24h)")
    forecast_parser.add_argument("--seed", type=int, default=None, help="Random seed for synthetic values")
    forecast_parser.add_argument("--json", action="store_true", dest="json_output", help="Output as JSON")
    forecast_parser.add_argument("--history", action="store_true", dest="include_history",
                                 help="Include synthetic recent history")

    serve_parser = subparsers.add_parser("serve", help="Start the forecast HTTP API")
    serve_parser.add_argument("--host", default=None, help="Host (default: 127.0.0.1)")
    serve_parser.add_argument("--port", type=int, default=None, help="Port (default: 8010)")

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    _setup_logging(args.verbose, args.quiet)

    if args.command == "forecast":
        result = cmd_forecast(
            input_path=args.input_path,
            output_path=args.output_path,
            window=args.window,
            seed=args.seed,
            json_output=args.json_output,
            include_history=args.include_history,
        )
        if result is None:
            sys.exit(1)
    elif args.command == "serve":
        cmd_serve(args.host, args.port)


if __name__ == "__main__":
    main()
