import argparse
import json
import sys
from typing import List, Optional
from coveralls_migrate import __version__
from coveralls_migrate.core.exceptions import MigrationError
from coveralls_migrate.core.migration_engine import MigrationEngine
from coveralls_migrate.core.models import Credentials
from coveralls_migrate.utils.config_manager import ConfigManager, DEFAULT_CONFIG_PATH
from coveralls_migrate.utils.logger import configure_logging, get_logger

logger = get_logger(__name__)

PROG = "coveralls-migrate-to-github-app"

START_DESCRIPTION = """\
Migrate your Coveralls repositories from OAuth App access to the Coveralls
Official GitHub App.

This tool is designed for organizations with 100+ repositories that cannot use
the standard GitHub UI migration workflow.
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=PROG, description="Coveralls OAuth App to GitHub App migration tool")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    start = subparsers.add_parser(
        "start",
        help="Migrate Coveralls repositories from OAuth App to GitHub App",
        description=START_DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    start.add_argument("--coveralls-token", metavar="TOKEN",
                       help="Coveralls Personal API Token (env: COVERALLS_TOKEN)")
    start.add_argument("--github-token", metavar="TOKEN",
                       help="GitHub Personal Access Token (env: GITHUB_TOKEN)")
    start.add_argument("--org-name", metavar="ORG",
                       help="GitHub organization name (env: COVERALLS_ORG_NAME)")
    start.add_argument("--config", default=DEFAULT_CONFIG_PATH,
                       help=f"Path to a JSON config file (default: {DEFAULT_CONFIG_PATH})")
    start.set_defaults(handler=start_command, command_parser=start)
    return parser


def load_config(args: argparse.Namespace) -> ConfigManager:
    overrides = {
        "coveralls": {"token": args.coveralls_token},
        "github": {"token": args.github_token, "org_name": args.org_name},
    }
    return ConfigManager(args.config, overrides=overrides)


def start_command(args: argparse.Namespace) -> int:
    try:
        config_manager = load_config(args)
    except json.JSONDecodeError as e:
        print(f"Invalid configuration file {args.config}: {e}", file=sys.stderr)
        return 1
    configure_logging(config_manager.get_logging_config())

    missing = config_manager.missing_fields()
    if missing:
        options = {
            "coveralls.token": "--coveralls-token",
            "github.token": "--github-token",
            "github.org_name": "--org-name",
        }
        args.command_parser.error(f"the following arguments are required: {', '.join(options[m] for m in missing)}")

    credentials = Credentials(
        coveralls_token=config_manager.get("coveralls.token"),
        github_token=config_manager.get("github.token"),
        org_name=config_manager.get("github.org_name"),
    )
    engine = MigrationEngine(credentials, coveralls_api_base=config_manager.get("coveralls.api_base"))

    try:
        engine.run()
    except MigrationError as e:
        logger.debug(f"Migration aborted: {e!r}")
        print(str(e), file=sys.stderr)
        return 1
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    return args.handler(args)
