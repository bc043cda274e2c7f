"""CLI entry point for inspecting world configurations."""

import argparse
import logging
from pathlib import Path

import structlog

from .config import list_worlds
from .exceptions import WorldLoaderError
from .manager import WorldLifecycleManager
from .providers import TomlConfigProvider, WorldConfiguration
from .registry import BiomeIdRegistry
from .settings import Settings, find_settings, load_settings
from .types import HostContext
from .wire import encode_world_packet


def configure_logging(level_name: str) -> None:
    """Configure structlog for CLI output."""
    level = logging.getLevelName(level_name.upper())
    if not isinstance(level, int):
        level = logging.INFO
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Inspect world configurations and build client sync packets"
    )
    parser.add_argument(
        "--settings",
        type=str,
        default=None,
        help="Path or name of loader TOML settings file",
    )
    parser.add_argument(
        "--configs-root",
        type=str,
        default=None,
        help="Directory containing worlds/ (overrides settings)",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Verbose logging"
    )

    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("list", help="List worlds with a config directory")

    inspect = commands.add_parser("inspect", help="Load a world and show its biome ids")
    inspect.add_argument("world", help="World name")

    pack = commands.add_parser("pack", help="Write the client sync packet for a world")
    pack.add_argument("world", help="World name")
    pack.add_argument(
        "--output", "-o", type=str, required=True, help="Output packet path"
    )

    return parser


def load_world(settings: Settings, configs_root: Path, world_name: str) -> WorldConfiguration:
    """Load one world the way a dedicated host would at startup."""
    registry = BiomeIdRegistry(capacity=settings.loader.registry_capacity)
    manager = WorldLifecycleManager(
        configs_root=configs_root,
        provider=TomlConfigProvider(registry),
        registry=registry,
    )
    handle = manager.on_pre_registration(
        HostContext(is_dedicated_mode=True, session_folder_name=world_name)
    )
    if handle is None:
        raise FileNotFoundError(f"No config directory for world '{world_name}'")
    configuration = handle.configuration
    manager.on_shutdown()
    return configuration


def main(argv: list[str] | None = None) -> int:
    """Run the CLI."""
    args = build_parser().parse_args(argv)

    if args.settings:
        settings = load_settings(find_settings(args.settings))
    else:
        settings = Settings()

    configure_logging("debug" if args.verbose else settings.loader.log_level)
    logger = structlog.get_logger()

    configs_root = Path(args.configs_root or settings.loader.configs_root)

    if args.command == "list":
        for name in list_worlds(configs_root):
            print(name)
        return 0

    try:
        configuration = load_world(settings, configs_root, args.world)
    except (FileNotFoundError, WorldLoaderError) as e:
        logger.error("world_load_failed", world=args.world, error=str(e))
        return 1

    if args.command == "inspect":
        print(f"World: {configuration.world_name}")
        for name, biome_id in sorted(configuration.biome_ids.items(), key=lambda kv: kv[1]):
            print(f"  {biome_id:>3}  {name}")
        print(f"Claimed ids: {sorted(configuration.claimed_identifiers())}")
    elif args.command == "pack":
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(
            encode_world_packet(configuration.world_name, configuration.config)
        )
        logger.info("packet_written", world=configuration.world_name, path=str(output_path))

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
