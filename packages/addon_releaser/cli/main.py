"""Command-line interface for the Add-On Releaser."""

from __future__ import annotations

import argparse
import asyncio
import logging
import subprocess
import sys
from pathlib import Path

import httpx
from pydantic import ValidationError
from rich.console import Console

from addon_releaser.core.api.http import (
    ApiError,
    AsyncApiClient,
    HttpByteFetcher,
    HttpClientConfig,
    RetryPolicy,
)
from addon_releaser.core.config import DEFAULT_CONFIG_FILE_NAME, load_releaser_config
from addon_releaser.core.config.models import ReleaserConfig
from addon_releaser.core.io import RealFileSystem
from addon_releaser.core.release import ReleaseAssembler, ReleaseError, ReleaseResult
from addon_releaser.core.release.constants import DIST_NAME, TOOL_NAME
from addon_releaser.core.updates import (
    check_for_update,
    fetch_latest_version,
    installed_version,
    upgrade_command,
)
from addon_releaser.core.utils.logging import configure_logging

console = Console(soft_wrap=True)
err_console = Console(stderr=True, soft_wrap=True)
logger = logging.getLogger(__name__)

# The update check must never hold up a release for long
UPDATE_CHECK_CONFIG = HttpClientConfig(timeout=httpx.Timeout(5.0, connect=3.0))
UPDATE_CHECK_RETRY = RetryPolicy(max_attempts=1)

FATAL_ERRORS = (ReleaseError, ApiError, OSError, ValidationError, ValueError, ImportError)


def _print_error(message: str) -> None:
    err_console.print(message, style="red", markup=False, highlight=False)


async def release_async(config: ReleaserConfig, invocation_dir: Path) -> ReleaseResult:
    """Run a release while checking for a newer version in the background.

    Args:
        config: Validated releaser configuration
        invocation_dir: Directory the configuration's ``cwd`` is relative to

    Returns:
        The release result
    """
    async with (
        AsyncApiClient() as client,
        AsyncApiClient(UPDATE_CHECK_CONFIG, retry_policy=UPDATE_CHECK_RETRY) as update_client,
    ):
        update_task = asyncio.create_task(check_for_update(update_client))

        try:
            assembler = ReleaseAssembler(
                config,
                fs=RealFileSystem(),
                fetcher=HttpByteFetcher(client),
                invocation_dir=invocation_dir,
            )
            result = await assembler.run()
        except BaseException:
            update_task.cancel()
            await asyncio.gather(update_task, return_exceptions=True)
            raise

        latest = await update_task

    if latest is not None:
        console.print(
            f"[yellow]A new version of {TOOL_NAME} is available: v{latest} "
            f"(installed v{installed_version()}). "
            f"Run `{DIST_NAME} --update` to update.[/yellow]"
        )
    return result


async def _latest_published_version() -> str:
    async with AsyncApiClient(UPDATE_CHECK_CONFIG, retry_policy=UPDATE_CHECK_RETRY) as client:
        return await fetch_latest_version(client)


def run_update() -> int:
    """Upgrade the installed distribution when PyPI has a different version.

    Failures are reported but never change the exit code.
    """
    current = installed_version()
    try:
        latest = asyncio.run(_latest_published_version())
    except ApiError as e:
        _print_error(f"Could not check for updates: {e}")
        return 0

    if latest == current:
        console.print(f"{TOOL_NAME} is already up to date (v{current}).", markup=False)
        return 0

    console.print(f"Updating {TOOL_NAME} from v{current} to v{latest}...", markup=False)
    try:
        completed = subprocess.run(upgrade_command(), check=False)
    except OSError as e:
        _print_error(f"Could not run pip: {e}")
        return 0
    if completed.returncode != 0:
        _print_error(f"pip exited with status {completed.returncode}; {TOOL_NAME} was not updated.")
    else:
        console.print(f"[green]{TOOL_NAME} updated to v{latest}.[/green]")
    return 0


def run_release(args: argparse.Namespace) -> int:
    """Load the configuration and write the release files."""
    config_path = Path(args.config)
    try:
        config = load_releaser_config(config_path)
    except FileNotFoundError:
        _print_error(f'Could not find configuration file "{config_path.resolve()}".')
        return 1
    except (ValidationError, ValueError) as e:
        _print_error(f'Invalid configuration file "{config_path}": {e}')
        return 1

    configure_logging(
        level=args.log_level or config.logging.level,
        format_string=config.logging.format,
        structured=args.log_json or config.logging.structured,
    )

    try:
        result = asyncio.run(release_async(config, Path.cwd()))
    except FATAL_ERRORS as e:
        logger.debug("Release failed", exc_info=True)
        _print_error(f"ERROR: {e}")
        return 1

    for archive in result.archives:
        console.print(f"Add-on generated: {archive.relative_path}", markup=False, highlight=False)
    return 0


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for CLI."""
    p = argparse.ArgumentParser(
        prog=DIST_NAME,
        description=f"{TOOL_NAME} - package MCBE packs into .mcaddon and .mcpack files",
    )
    p.add_argument(
        "config",
        nargs="?",
        default=f"./{DEFAULT_CONFIG_FILE_NAME}",
        help=f"Path to the configuration file (default: ./{DEFAULT_CONFIG_FILE_NAME})",
    )
    p.add_argument("-v", "--version", action="store_true", help="Print the version and exit")
    p.add_argument(
        "-u", "--update", action="store_true", help="Update to the latest published version"
    )
    p.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
        default=None,
        help="Logging level (default: from the configuration file)",
    )
    p.add_argument("--log-json", action="store_true", help="Emit structured JSON logs")
    return p


def main(argv: list[str] | None = None) -> None:
    """Main entry point for CLI."""
    args = build_arg_parser().parse_args(argv)

    if args.version:
        console.print(f"{TOOL_NAME} v{installed_version()}", markup=False, highlight=False)
        return
    if args.update:
        sys.exit(run_update())

    sys.exit(run_release(args))


if __name__ == "__main__":
    main()
