# spinwheel/main.py
import argparse
import asyncio
import json
import logging
import os
import sys
import time

from spinwheel.application.simulation.spin_runner import SpinRunner
from spinwheel.domain.events.event_dispatcher import EventDispatcher
from spinwheel.domain.spin.errors import SpinEngineError
from spinwheel.domain.wheel.factories.wheel_factory import WheelFactory
from spinwheel.infrastructure.config.loaders.yaml_loader import ConfigError, YamlConfigLoader
from spinwheel.infrastructure.config.validators.schema_validator import SchemaValidator
from spinwheel.infrastructure.logging.log_manager import LOG_MODES, LogManager, initialize_logging
from spinwheel.infrastructure.rng.rng_provider import RNGProvider

PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))
DEFAULT_CONFIG = os.path.join(PACKAGE_DIR, "application", "config", "simulation", "default_simulation.yaml")


def parse_arguments(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Spin a weighted decision wheel")

    parser.add_argument(
        "-c", "--config",
        default=DEFAULT_CONFIG,
        help="Path to simulation configuration file"
    )
    parser.add_argument(
        "-w", "--wheel",
        default=None,
        help="Wheel name (file stem or id in the wheels directory) or path to a wheel YAML file"
    )
    parser.add_argument(
        "-n", "--spins",
        type=int,
        default=None,
        help="Number of spin requests"
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for the random source"
    )
    strategies = RNGProvider.get_available_strategies()
    parser.add_argument(
        "--rng",
        choices=sorted(strategies),
        default=None,
        help="Random source: " + "; ".join(f"'{name}'={desc}" for name, desc in sorted(strategies.items()))
    )
    parser.add_argument(
        "--realtime",
        action="store_true",
        help="Play every frame on an asyncio loop instead of running headless"
    )
    parser.add_argument(
        "-o", "--output",
        default=None,
        help="Write the JSON summary to this file instead of stdout"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output"
    )
    parser.add_argument(
        "--log-mode",
        choices=sorted(LOG_MODES),
        default=None,
        help="Select logging mode: 'all'=verbose, 'app'=application only, 'domain'=domain only, 'none'=minimal"
    )

    return parser.parse_args(argv)


def resolve_path(path: str) -> str:
    """Relative paths are tried against the working directory, then the package."""
    if os.path.isabs(path) or os.path.exists(path):
        return path
    return os.path.join(PACKAGE_DIR, path)


def load_wheel(config_loader: YamlConfigLoader, wheel_config: dict, wheel_name: str):
    """
    Find and build the requested wheel.

    Raises:
        ConfigError: If the wheel cannot be found or loaded
        InvalidWheelError: If the wheel definition is not spinnable
    """
    factory = WheelFactory()
    schema_path = wheel_config.get("schema")
    schema_path = resolve_path(schema_path) if schema_path else None

    directory = resolve_path(wheel_config.get("directory", "application/config/wheels"))
    wheel_path = wheel_name if os.path.isfile(wheel_name) else config_loader.find_file(directory, wheel_name)

    if wheel_path:
        config = config_loader.load_file(wheel_path, schema_path)
        stem = os.path.splitext(os.path.basename(wheel_path))[0]
        return factory.create_wheel(config, wheel_id=config.get("id") or stem)

    # Not a file name, look the wheel up by id
    configs = config_loader.load_directory(directory, schema_path, ignore_errors=True)
    wheels = factory.create_wheels(configs, ignore_errors=True)
    if wheel_name in wheels:
        return wheels[wheel_name]

    raise ConfigError(f"Wheel '{wheel_name}' not found in {directory}")


def main(argv=None):
    """Main entry point for the spin wheel simulator."""
    args = parse_arguments(argv)
    start_time = time.time()

    config_loader = YamlConfigLoader(SchemaValidator())

    try:
        config = config_loader.load_file(args.config)
    except ConfigError as e:
        print(f"Error loading configuration: {str(e)}", file=sys.stderr)
        return 1

    log_config = LogManager.apply_mode(config.get("logging", {}), args.log_mode, args.verbose)
    initialize_logging(log_config)
    logger = logging.getLogger("main")
    logger.info(f"Loaded configuration from {args.config}")

    rng_config = dict(config.get("rng") or {})
    if args.rng:
        rng_config["strategy"] = args.rng
    if args.seed is not None:
        rng_config["seed"] = args.seed
    try:
        rng = RNGProvider().create_from_config(rng_config)
    except ValueError as e:
        logger.error(str(e))
        return 1

    wheel_config = config.get("wheels") or {}
    wheel_name = args.wheel or wheel_config.get("default", "guitar_notes")
    try:
        wheel = load_wheel(config_loader, wheel_config, wheel_name)
    except (ConfigError, SpinEngineError) as e:
        logger.error(f"Cannot load wheel: {str(e)}")
        return 1

    simulation_config = config.get("simulation") or {}
    spins = args.spins if args.spins is not None else simulation_config.get("spins", 10)
    realtime = args.realtime or simulation_config.get("realtime", False)

    runner = SpinRunner(wheel, rng, event_dispatcher=EventDispatcher())
    if realtime:
        summary = asyncio.run(runner.run_realtime(
            spins,
            frame_interval=simulation_config.get("frame_interval", 1 / 60),
            pause=simulation_config.get("pause", 0.5),
        ))
    else:
        summary = runner.run(spins)

    output = json.dumps(summary, indent=2, ensure_ascii=False)
    if args.output:
        output_dir = os.path.dirname(args.output)
        if output_dir:
            os.makedirs(output_dir, exist_ok=True)
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(output)
        logger.info(f"Summary written to {args.output}")
    else:
        print(output)

    logger.info(f"Done in {time.time() - start_time:.2f}s")
    return 0


if __name__ == "__main__":
    sys.exit(main())
