"""
``shipyard`` command-line client.

Usage:
    shipyard login --token TOKEN [--api-url URL]
    shipyard projects list
    shipyard projects create --name blog --framework React --repo https://github.com/me/blog
    shipyard logs list --project 1 --limit 20
"""

import argparse
import sys
from typing import List, Optional

import httpx

from shipyard_cli import __version__
from shipyard_cli.client import ApiClient, ApiError
from shipyard_cli.commands import databases, domains, logs, metrics, projects
from shipyard_cli.config import ConfigManager

EXAMPLES = """\
Examples:
  shipyard login --token <your-token> --api-url http://localhost:5000
  shipyard projects list
  shipyard projects create --name blog --framework Next.js --repo https://github.com/me/blog
  shipyard projects info 1
  shipyard domains add --domain blog.example.com --project 1
  shipyard domains assign 2 1
  shipyard databases create --name blog_db --type PostgreSQL --project 1
  shipyard databases info 1 --show-credentials
  shipyard projects restart 1
  shipyard logs list --project 1 --limit 20
  shipyard metrics show
  shipyard projects delete 1 --yes
"""


def cmd_login(args, config: ConfigManager, transport) -> int:
    if args.api_url:
        config.set_api_url(args.api_url)
    config.set_token(args.token)
    print(f"Logged in. API: {config.api_url}")
    return 0


def cmd_logout(args, config: ConfigManager, transport) -> int:
    config.clear_token()
    print("Logged out.")
    return 0


def cmd_status(args, config: ConfigManager, transport) -> int:
    print(f"API URL:   {config.api_url}")
    if not config.is_logged_in():
        print("Logged in: no")
        return 0
    print("Logged in: yes")
    with ApiClient(config.api_url, token=config.token, transport=transport) as client:
        try:
            health = client.health()
        except (ApiError, httpx.HTTPError) as e:
            print(f"API:       unreachable ({e})")
            return 1
    print(f"API:       {health.get('status')} ({health.get('timestamp')})")
    return 0


def cmd_examples(args, config: ConfigManager, transport) -> int:
    print(EXAMPLES, end="")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="shipyard",
        description="Deploy and manage web projects on your Shipyard server",
        epilog="Run `shipyard examples` for common workflows.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--json", action="store_true", help="Print raw JSON instead of tables")
    subparsers = parser.add_subparsers(dest="command", required=True)

    login_parser = subparsers.add_parser("login", help="Store an API token")
    login_parser.add_argument("--token", "-t", required=True)
    login_parser.add_argument("--api-url", help="Server URL (default: http://localhost:5000)")
    login_parser.set_defaults(local_func=cmd_login)

    subparsers.add_parser("logout", help="Forget the stored token").set_defaults(local_func=cmd_logout)
    subparsers.add_parser("status", help="Show login state and API health").set_defaults(local_func=cmd_status)
    subparsers.add_parser("examples", help="Show usage examples").set_defaults(local_func=cmd_examples)

    for module in (projects, domains, databases, logs, metrics):
        module.register(subparsers)
    return parser


def main(argv: Optional[List[str]] = None, transport: Optional[httpx.BaseTransport] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    config = ConfigManager()

    local_func = getattr(args, "local_func", None)
    if local_func is not None:
        return local_func(args, config, transport)

    if not config.is_logged_in():
        print("You are not logged in. Run `shipyard login --token <token>` first.", file=sys.stderr)
        return 1

    with ApiClient(config.api_url, token=config.token, transport=transport) as client:
        try:
            return args.func(args, client)
        except ApiError as e:
            print(f"Error: {e.message}", file=sys.stderr)
            return 1
        except httpx.HTTPError as e:
            print(f"Error: could not reach {config.api_url} ({e})", file=sys.stderr)
            return 1


if __name__ == "__main__":
    sys.exit(main())
