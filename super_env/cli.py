"""
Command-line interface for super-env.

This module provides the CLI entry point and argument parsing.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from rich import print as rprint
from rich.logging import RichHandler
from rich.markup import escape

from . import __version__
from .config import SuperEnvConfig
from .crypto import decrypt_file, encrypt_file
from .edit import edit_encrypted_file, resolve_editor
from .errors import SuperEnvError
from .gitignore import create_gitignore_if_not_exists
from .keys import generate_key, save_key

SAMPLE_ENV = "# Environment variables\n\n# Add your environment variables here\n"


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    try:
        return _main(argv)
    except KeyboardInterrupt:
        rprint("[yellow]Cancelled.[/yellow]")
        return 130
    except (SuperEnvError, OSError) as exc:
        rprint(f"[red]Error: {escape(str(exc))}[/red]")
        return 1


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="super-env",
        description="Secure .env file management with type-safety",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  super-env init                          # Generate MASTER_KEY.key and update .gitignore
  super-env encrypt                       # Encrypt .env to .env.enc
  super-env decrypt -o .env.local         # Decrypt .env.enc to .env.local
  super-env edit -e "code --wait"         # Edit .env.enc in VS Code
  super-env encrypt -k ci/MASTER_KEY.key  # Use a key stored elsewhere
        """,
    )

    parser.add_argument(
        "--config",
        help="Configuration file path (default: .super-env.yaml if present)",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"super-env {__version__}",
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="count",
        default=0,
        help="Increase verbosity (can be used multiple times)",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="<command>")
    subparsers.required = True

    init_parser = subparsers.add_parser("init", help="Initialize super-env in your project")
    init_parser.add_argument("-k", "--key", help="Master key file path (default: MASTER_KEY.key)")
    init_parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite an existing master key file",
    )

    encrypt_parser = subparsers.add_parser("encrypt", help="Encrypt a .env file")
    encrypt_parser.add_argument("-i", "--input", help="Input .env file path (default: .env)")
    encrypt_parser.add_argument(
        "-o", "--output", help="Output encrypted file path (default: .env.enc)"
    )
    encrypt_parser.add_argument("-k", "--key", help="Master key file path (default: MASTER_KEY.key)")

    decrypt_parser = subparsers.add_parser("decrypt", help="Decrypt a .env.enc file")
    decrypt_parser.add_argument(
        "-i", "--input", help="Input encrypted file path (default: .env.enc)"
    )
    decrypt_parser.add_argument("-o", "--output", help="Output .env file path (default: .env)")
    decrypt_parser.add_argument("-k", "--key", help="Master key file path (default: MASTER_KEY.key)")

    edit_parser = subparsers.add_parser("edit", help="Edit an encrypted .env file")
    edit_parser.add_argument("-f", "--file", help="Encrypted file path (default: .env.enc)")
    edit_parser.add_argument("-k", "--key", help="Master key file path (default: MASTER_KEY.key)")
    edit_parser.add_argument(
        "-e", "--editor", help="Editor to use (default: $VISUAL, $EDITOR or vi)"
    )

    return parser


def _configure_logging(verbose: int) -> None:
    """Send library logs to the terminal when -v is given."""
    if verbose <= 0:
        return

    logger = logging.getLogger("super_env")
    logger.setLevel(logging.DEBUG if verbose > 1 else logging.INFO)
    logger.addHandler(RichHandler(show_time=False, show_path=False))


def _main(argv: list[str] | None) -> int:
    args = _build_parser().parse_args(argv)
    _configure_logging(args.verbose)

    config = SuperEnvConfig.load(args.config)

    if args.command == "init":
        return _init(config, key_path=args.key or config.key_file, force=args.force)

    if args.command == "encrypt":
        input_path = args.input or config.env_file
        output_path = args.output or config.encrypted_file
        rprint(f"[blue]Encrypting {escape(input_path)} to {escape(output_path)}[/blue]")
        encrypt_file(input_path, output_path, args.key or config.key_file)
        rprint(f"[green]Successfully encrypted {escape(input_path)} to {escape(output_path)}[/green]")
        rprint(
            f"[yellow]Tip:[/yellow] Commit {escape(output_path)} to your repository, "
            f"but keep {escape(input_path)} in your .gitignore"
        )
        return 0

    if args.command == "decrypt":
        input_path = args.input or config.encrypted_file
        output_path = args.output or config.env_file
        rprint(f"[blue]Decrypting {escape(input_path)} to {escape(output_path)}[/blue]")
        decrypt_file(input_path, output_path, args.key or config.key_file)
        rprint(f"[green]Successfully decrypted {escape(input_path)} to {escape(output_path)}[/green]")
        return 0

    if args.command == "edit":
        encrypted_path = args.file or config.encrypted_file
        editor = resolve_editor(args.editor or config.editor)
        rprint(f"[blue]Opening {escape(encrypted_path)} in {escape(editor)}[/blue]")
        if edit_encrypted_file(encrypted_path, args.key or config.key_file, editor):
            rprint(f"[green]Successfully updated and encrypted {escape(encrypted_path)}[/green]")
        else:
            rprint(f"[yellow]No changes made to {escape(encrypted_path)}[/yellow]")
        return 0

    return 1


def _init(config: SuperEnvConfig, key_path: str, force: bool) -> int:
    """Generate the master key and prepare the project."""
    rprint("[green]Initializing super-env in your project[/green]")

    if Path(key_path).exists() and not force:
        rprint(
            f"[red]Error: {escape(key_path)} already exists. "
            "Use --force to replace it (files encrypted with the old key "
            "will no longer decrypt).[/red]"
        )
        return 1

    save_key(generate_key(), key_path)
    create_gitignore_if_not_exists([key_path, config.env_file])
    rprint(f"[cyan]Master key written to {escape(key_path)} and added to .gitignore[/cyan]")

    if not Path(config.env_file).exists():
        Path(config.env_file).write_text(SAMPLE_ENV, encoding="utf-8")
        rprint(f"[green]Created a sample {escape(config.env_file)} file[/green]")

    rprint("[green]Initialization complete![/green]")
    rprint("[yellow]Next steps:[/yellow]")
    rprint(f"1. Add your environment variables to {escape(config.env_file)}")
    rprint("2. Run [bold]super-env encrypt[/bold] to encrypt it")
    rprint(f"3. Commit {escape(config.encrypted_file)} to your repository")
    rprint(f"4. Share {escape(key_path)} with your team and CI out-of-band")
    return 0
