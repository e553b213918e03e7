"""
Process entry point.
Usage:
  python -m gatekeeper [serve] [--host 0.0.0.0] [--port 8080] [--config config.yaml]
  python -m gatekeeper menu [--config config.yaml]
"""

import argparse
import sys

from gatekeeper.config import DEFAULT_CONFIG_PATH, load_settings
from gatekeeper.database import Gateway
from gatekeeper.exceptions import ConfigMissingError, ConfigParseError, GatekeeperError
from gatekeeper.utils.logger import configure_logging, get_logger

logger = get_logger("gatekeeper")


def serve(settings, gateway, host=None, port=None):
    import uvicorn
    from gatekeeper.main import create_app

    app = create_app(settings, gateway)
    uvicorn.run(app, host=host or settings.server.host, port=port or settings.server.port,
                log_config=None)


def menu(settings, gateway):
    from gatekeeper.console import ConsoleMenu
    from gatekeeper.services.visitor_service import VisitorRegistry

    try:
        gateway.create_tables()
    except GatekeeperError as e:
        logger.error(f"Cannot prepare the database: {e.detail}")
        sys.exit(1)
    ConsoleMenu(VisitorRegistry(gateway), site_name=settings.global_.site_name,
                debug=settings.global_.debug).run()


def main(argv=None):
    parser = argparse.ArgumentParser(prog="gatekeeper", description="Gate-access visitor registry")
    parser.add_argument("--config", default=DEFAULT_CONFIG_PATH, help="Path to config.yaml")
    sub = parser.add_subparsers(dest="command")

    serve_parser = sub.add_parser("serve", help="Run the HTTP API (default)")
    serve_parser.add_argument("--host", help="Bind address (overrides server.host)")
    serve_parser.add_argument("--port", type=int, help="Bind port (overrides server.port)")
    sub.add_parser("menu", help="Run the interactive console menu")

    args = parser.parse_args(argv)

    try:
        settings = load_settings(args.config)
    except (ConfigMissingError, ConfigParseError) as e:
        print(e.detail, file=sys.stderr)
        sys.exit(1)

    configure_logging(settings.global_.debug, settings.global_.log_dir, settings.global_.log_file)
    gateway = Gateway.from_settings(settings)

    if args.command == "menu":
        menu(settings, gateway)
    else:
        serve(settings, gateway, getattr(args, "host", None), getattr(args, "port", None))


if __name__ == "__main__":
    main()
