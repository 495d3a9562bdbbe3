#!/usr/bin/env python3
"""
X-Recruit CLI - Main Entry Point

Usage:
    xrecruit register               # Create an account (prompts for details)
    xrecruit login                  # Login with email and password
    xrecruit logout                 # Forget the local session
    xrecruit status                 # Local session state (no network)
    xrecruit whoami                 # Profile from the server
    xrecruit health                 # Check that the backend is up
"""

import argparse
import asyncio
import logging
import sys
from datetime import datetime
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.markup import escape
from rich.prompt import Prompt
from rich.table import Table

from cli.auth import AuthClient
from cli.config import CLIConfig


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI"""
    parser = argparse.ArgumentParser(
        prog="xrecruit",
        description="X-Recruit - account and session management",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  xrecruit register                            Create a student account
  xrecruit register --user-type recruiter      Create a recruiter account
  xrecruit login -e you@example.com            Login (password is prompted)
  xrecruit status                              Check login status
  xrecruit whoami                              Show your profile
  xrecruit logout                              Logout from CLI
        """
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Register command
    register_parser = subparsers.add_parser("register", help="Create an X-Recruit account")
    register_parser.add_argument("--email", "-e", help="Email address")
    register_parser.add_argument("--first-name", help="First name")
    register_parser.add_argument("--last-name", help="Last name")
    register_parser.add_argument(
        "--user-type",
        choices=["student", "recruiter"],
        default=None,
        help="Account type (default: student)"
    )

    # Login command
    login_parser = subparsers.add_parser("login", help="Login to X-Recruit")
    login_parser.add_argument("--email", "-e", help="Email address")

    subparsers.add_parser("logout", help="Logout from X-Recruit")
    subparsers.add_parser("status", help="Show authentication status")
    subparsers.add_parser("whoami", help="Show current user info")
    subparsers.add_parser("health", help="Check the backend server")

    # Server URL
    parser.add_argument(
        "--server-url",
        type=str,
        default=None,
        help="Backend API URL (default: http://localhost:3001/api)"
    )

    # Config file
    parser.add_argument(
        "--config",
        type=str,
        help="Path to config file"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output"
    )

    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s 1.0.0"
    )

    return parser


def load_config(args: argparse.Namespace) -> CLIConfig:
    config = CLIConfig.load_default()
    if args.config:
        config.load_from_file(args.config)
    if args.server_url:
        config.api_base_url = args.server_url.rstrip("/")
    return config


def print_result(console: Console, result: Dict[str, Any]) -> bool:
    if result.get("success"):
        console.print(f"[green]✓ {escape(str(result.get('message', '')))}[/green]")
        return True
    console.print(f"[red]✗ {escape(str(result.get('message', 'Request failed')))}[/red]")
    return False


def print_user(console: Console, user: Dict[str, Any], title: str = "Account") -> None:
    table = Table(title=title, show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")

    name = f"{user.get('firstName', '')} {user.get('lastName', '')}".strip()
    table.add_row("Name", escape(name) or "-")
    table.add_row("Email", escape(str(user.get("email", "-"))))
    table.add_row("Type", escape(str(user.get("userType", "-"))))
    table.add_row("ID", str(user.get("id", "-")))
    if user.get("createdAt"):
        table.add_row("Member since", escape(str(user["createdAt"])))

    console.print(table)


async def run_register(client: AuthClient, args: argparse.Namespace, console: Console) -> bool:
    email = args.email or Prompt.ask("Email")
    first_name = args.first_name or Prompt.ask("First name")
    last_name = args.last_name or Prompt.ask("Last name")
    password = Prompt.ask("Password", password=True)
    confirm_password = Prompt.ask("Confirm password", password=True)

    result = await client.register(
        email=email,
        password=password,
        confirm_password=confirm_password,
        first_name=first_name,
        last_name=last_name,
        user_type=args.user_type,
    )
    ok = print_result(console, result)
    if ok:
        print_user(console, result["data"]["user"])
    return ok


async def run_login(client: AuthClient, args: argparse.Namespace, console: Console) -> bool:
    email = args.email or Prompt.ask("Email")
    password = Prompt.ask("Password", password=True)

    result = await client.login(email, password)
    ok = print_result(console, result)
    if ok:
        user = result["data"]["user"]
        console.print(f"Welcome, [bold]{escape(str(user.get('firstName', user.get('email'))))}[/bold]!")
    return ok


def show_status(client: AuthClient, console: Console) -> bool:
    """Local check only: the server may still reject the token"""
    session = client.session
    user = session.current_user()

    if not session.is_valid():
        if session.current_token():
            console.print("[yellow]Session expired. Please login again.[/yellow]")
        else:
            console.print("[yellow]Not logged in[/yellow]")
        console.print("  [cyan]xrecruit login[/cyan]      Login to your account")
        console.print("  [cyan]xrecruit register[/cyan]   Create an account")
        return False

    console.print("[green]✓ Logged in[/green]")
    if user:
        print_user(console, user, title="Session")
    expires_at = session.expires_at()
    if expires_at:
        console.print(f"[dim]Token expires {datetime.fromtimestamp(expires_at):%Y-%m-%d %H:%M}[/dim]")
    return True


async def run_whoami(client: AuthClient, console: Console) -> bool:
    result = await client.get_profile()
    ok = print_result(console, result)
    if ok:
        print_user(console, result["data"]["user"], title="Profile")
    return ok


async def run_health(client: AuthClient, console: Console) -> bool:
    result = await client.check_health()
    ok = print_result(console, result)
    if ok and result.get("timestamp"):
        console.print(f"[dim]{escape(str(result['timestamp']))}[/dim]")
    return ok


def run(args: argparse.Namespace, client: AuthClient, console: Console) -> int:
    """Dispatch a parsed command; returns the process exit code"""
    if args.command == "register":
        ok = asyncio.run(run_register(client, args, console))
    elif args.command == "login":
        ok = asyncio.run(run_login(client, args, console))
    elif args.command == "logout":
        client.logout()
        console.print("[green]Logged out successfully[/green]")
        ok = True
    elif args.command == "status":
        ok = show_status(client, console)
    elif args.command == "whoami":
        ok = asyncio.run(run_whoami(client, console))
    elif args.command == "health":
        ok = asyncio.run(run_health(client, console))
    else:
        return 2
    return 0 if ok else 1


def main(argv: Optional[List[str]] = None):
    """Main entry point"""
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s"
    )

    if not args.command:
        parser.print_help()
        sys.exit(2)

    console = Console()
    client = AuthClient.from_config(load_config(args))

    try:
        sys.exit(run(args, client, console))
    except KeyboardInterrupt:
        console.print("\nCancelled")
        sys.exit(130)


if __name__ == "__main__":
    main()
