"""Command-line entry point for the Bridge Aid service."""

from dotenv import load_dotenv
load_dotenv()

import argparse
import json
import random
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from bridge_aid.config.environment import EnvironmentConfig
from bridge_aid.config.exceptions import ConfigurationError
from bridge_aid.config.loader import load_config
from bridge_aid.config.models import AppConfig
from bridge_aid.domain.models import AgeRange, Category, IncomeBracket
from bridge_aid.logging import get_logger
from bridge_aid.logging.config import configure_logging
from bridge_aid.normalization import ResourceNormalizer
from bridge_aid.persistence import (
    PersistenceError,
    ResourceRepository,
    close_database,
    get_session,
    init_database,
)
from bridge_aid.service import CriteriaValidationError, ResourceMatchingService
from bridge_aid.sources import CatalogUnavailableError, StaticFileSource

logger = get_logger(__name__, component="cli")

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_INVALID_CRITERIA = 2


def load_runtime_config(
    config_path: Optional[Path], log_level_override: Optional[str]
) -> Tuple[AppConfig, EnvironmentConfig]:
    """Load configuration and settle the effective log level.

    Log level priority: CLI > environment > config file > INFO.

    Raises:
        ConfigurationError: If configuration is invalid
    """
    app_config, env_config = load_config(config_path)

    if log_level_override:
        env_config.log_level = log_level_override
    elif env_config.log_level:
        pass
    elif app_config.logging and app_config.logging.level:
        env_config.log_level = app_config.logging.level
    else:
        env_config.log_level = "INFO"

    return app_config, env_config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bridge-aid",
        description="Bridge Aid - match people with local social-service resources",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: config.yaml if present)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (overrides config and environment)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default=None, help="Bind address (default: server.host)")
    serve.add_argument("--port", type=int, default=None, help="Port (default: PORT or 3001)")

    match = subparsers.add_parser("match", help="Match resources and print them as JSON")
    match.add_argument("--zip", required=True, help="User ZIP code")
    match.add_argument(
        "--need",
        required=True,
        help=f"Primary need ({', '.join(c.value for c in Category)})",
    )
    match.add_argument(
        "--age-range",
        default=None,
        help=f"Age bracket, e.g. {', '.join(a.value for a in AgeRange)}",
    )
    match.add_argument("--income", choices=[i.value for i in IncomeBracket], default=None)
    match.add_argument("--household-size", type=int, default=1)
    match.add_argument("--language", default=None, help="Preferred language (default English)")
    match.add_argument("--seed", type=int, default=None, help="Seed for reproducible distances")

    subparsers.add_parser("refresh", help="Reload the catalog and print the result")
    subparsers.add_parser("health", help="Print catalog health as JSON")

    seed = subparsers.add_parser("seed-db", help="Load a JSON catalog into the database")
    seed.add_argument(
        "--catalog",
        type=Path,
        default=None,
        help="Catalog JSON file (default: catalog.path or the bundled catalog)",
    )
    seed.add_argument("--database-url", default=None, help="Overrides DATABASE_URL")

    return parser


def _print_json(payload: Dict[str, Any]) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


def run_serve(args, app_config: AppConfig, env_config: EnvironmentConfig) -> int:
    import uvicorn

    from bridge_aid.api import create_app

    service = ResourceMatchingService.from_config(app_config, env_config)
    app = create_app(service, cors_origins=app_config.server.cors_origins)
    host = args.host or app_config.server.host
    port = args.port or env_config.resolve_port(app_config.server.port)

    logger.info(
        f"Bridge Aid API listening on http://{host}:{port}",
        extra={"event": "service.serve.starting", "host": host, "port": port},
    )
    # logging is already configured; keep uvicorn from replacing it
    uvicorn.run(app, host=host, port=port, log_config=None, log_level=env_config.log_level.lower())
    return EXIT_OK


def run_match(args, app_config: AppConfig, env_config: EnvironmentConfig) -> int:
    rng = random.Random(args.seed) if args.seed is not None else None
    service = ResourceMatchingService.from_config(app_config, env_config, rng=rng)
    payload = {
        "zip": args.zip,
        "primaryNeed": args.need,
        "ageRange": args.age_range,
        "incomeBracket": args.income,
        "householdSize": args.household_size,
        "preferredLanguage": args.language,
    }
    try:
        response = service.match(payload)
    except CriteriaValidationError as e:
        print(f"Invalid criteria: {e.message}", file=sys.stderr)
        for error in e.errors:
            print(f"  - {error}", file=sys.stderr)
        return EXIT_INVALID_CRITERIA
    finally:
        service.close()

    _print_json(response.to_json())
    return EXIT_OK


def run_refresh(args, app_config: AppConfig, env_config: EnvironmentConfig) -> int:
    service = ResourceMatchingService.from_config(app_config, env_config)
    try:
        _print_json(service.refresh())
    except CatalogUnavailableError as e:
        _print_json({"status": "error", "error": str(e)})
        return EXIT_ERROR
    finally:
        service.close()
    return EXIT_OK


def run_health(args, app_config: AppConfig, env_config: EnvironmentConfig) -> int:
    service = ResourceMatchingService.from_config(app_config, env_config)
    try:
        report = service.health()
    finally:
        service.close()
    _print_json(report)
    return EXIT_OK if report["status"] == "ok" else EXIT_ERROR


def run_seed_db(args, app_config: AppConfig, env_config: EnvironmentConfig) -> int:
    source = StaticFileSource(args.catalog or app_config.catalog.path)
    database_url = args.database_url or env_config.database_url
    try:
        resources = ResourceNormalizer().normalize_batch(source.fetch_records())
        init_database(database_url)
        with get_session() as session:
            written = ResourceRepository(session).upsert_many(resources)
    except CatalogUnavailableError as e:
        print(f"Cannot read catalog: {e}", file=sys.stderr)
        return EXIT_ERROR
    except PersistenceError as e:
        print(f"Database error: {e}", file=sys.stderr)
        return EXIT_ERROR
    finally:
        close_database()

    print(f"Seeded {written} resources from {source.path} into {database_url}")
    return EXIT_OK


COMMANDS = {
    "serve": run_serve,
    "match": run_match,
    "refresh": run_refresh,
    "health": run_health,
    "seed-db": run_seed_db,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the bridge-aid CLI.

    Returns:
        Exit code: 0 on success, 1 on configuration or runtime errors,
        2 on invalid match criteria
    """
    args = build_parser().parse_args(argv)

    try:
        app_config, env_config = load_runtime_config(args.config, args.log_level)
        configure_logging(
            level=env_config.log_level,
            format_type=app_config.logging.format,
            environment=env_config.environment,
        )
        logger.debug(
            "Configuration loaded",
            extra={
                "event": "config.loaded",
                "command": args.command,
                "data_source": env_config.data_source.value,
                "log_level": env_config.log_level,
            },
        )
        return COMMANDS[args.command](args, app_config, env_config)

    except ConfigurationError as e:
        print(f"Configuration Error: {e}", file=sys.stderr)
        return EXIT_ERROR
    except KeyboardInterrupt:
        print("\nShutdown requested by user", file=sys.stderr)
        return EXIT_OK
    except Exception as e:
        print(f"Fatal error: {e}", file=sys.stderr)
        logger.critical(
            "Fatal error",
            exc_info=True,
            extra={
                "event": "service.fatal",
                "error_type": type(e).__name__,
                "command": args.command,
            },
        )
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
