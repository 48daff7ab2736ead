"""Command line interface for portfolio_uploader."""
from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Callable, Dict, Optional, Sequence, Tuple

from rich.logging import RichHandler
from rich.prompt import Prompt

from .cli_progress import BatchProgressDisplay, console, render_configuration_summary
from .exceptions import BatchUploadError, DiscoveryError, PortfolioUploaderError
from .models import UploadConfig
from .orchestrator import BatchUploadProcess
from .services import CloudinaryAssetStore, PhotoRepository, open_firestore_client
from .use_cases import ClearFeaturedUseCase, FullResetUseCase, MarkFeaturedUseCase, confirm_reset

FIREBASE_CREDENTIALS_ENV = "FIREBASE_CREDENTIALS"
DEFAULT_FIREBASE_CREDENTIALS = Path("credentials/firebase-admin.json")
CLOUDINARY_ENV = ("CLOUDINARY_CLOUD_NAME", "CLOUDINARY_API_KEY", "CLOUDINARY_API_SECRET")

MENU = """
What do you want to do?
1) Upload photos
2) Set featured photos
3) Remove all featured photos
4) Reset database (PROCEED WITH CAUTION)
5) Exit
"""


class CLIError(RuntimeError):
    """Raised when CLI validation/execution fails."""


def _setup_logging(debug: bool, silent: bool, log_level: Optional[str]) -> str:
    """
    Configure logging.

    Silent unless --debug, --log-level or LOG_LEVEL is provided. Returns a string
    describing the effective mode.
    """
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    logging.disable(logging.NOTSET)

    env_level = os.getenv("LOG_LEVEL")
    if silent or not (debug or log_level or env_level):
        logging.disable(logging.CRITICAL)
        root_logger.setLevel(logging.CRITICAL + 1)
        return "silent"

    if debug:
        level = logging.DEBUG
    else:
        level = getattr(logging, (log_level or env_level or "INFO").upper(), logging.INFO)

    handler = RichHandler(
        console=console,
        rich_tracebacks=True,
        markup=False,
        show_time=False,
        show_path=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(handler)
    root_logger.setLevel(level)
    return logging.getLevelName(level)


def _strip_optional_quotes(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
        return value[1:-1]
    return value


def _load_env_file(path: Path, override: bool = False) -> None:
    if not path.is_file():
        raise CLIError(f"env file not found: {path}")

    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise CLIError(f"could not read env file {path}: {exc}") from exc

    for raw_line in content.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("export "):
            line = line[len("export "):].strip()
        key, sep, value = line.partition("=")
        key = key.strip()
        if not sep or not key:
            continue
        value = _strip_optional_quotes(value.strip())
        if override or key not in os.environ:
            os.environ[key] = value


def _resolve_default_env_file() -> Optional[Path]:
    default_env = Path(".env")
    return default_env if default_env.is_file() else None


def _require_env(names: Sequence[str]) -> Dict[str, str]:
    values = {name: os.getenv(name, "").strip() for name in names}
    missing = [name for name, value in values.items() if not value]
    if missing:
        raise CLIError(f"missing environment variables: {', '.join(missing)}")
    return values


def _firebase_credentials() -> Path:
    path = Path(os.getenv(FIREBASE_CREDENTIALS_ENV, "").strip() or DEFAULT_FIREBASE_CREDENTIALS)
    if not path.is_file():
        raise CLIError(f"Firebase credentials not found: {path} (set {FIREBASE_CREDENTIALS_ENV})")
    return path


@asynccontextmanager
async def _open_services(
    config: UploadConfig,
    with_assets: bool = True,
) -> AsyncIterator[Tuple[PhotoRepository, Optional[CloudinaryAssetStore]]]:
    """Open the Firestore client and, when needed, the Cloudinary client."""
    credentials_file = _firebase_credentials()
    cloudinary = _require_env(CLOUDINARY_ENV) if with_assets else None

    repository = PhotoRepository(open_firestore_client(credentials_file), config.collection)
    if cloudinary is None:
        yield repository, None
        return
    async with CloudinaryAssetStore(
        cloudinary["CLOUDINARY_CLOUD_NAME"],
        cloudinary["CLOUDINARY_API_KEY"],
        cloudinary["CLOUDINARY_API_SECRET"],
        folder=config.asset_folder,
    ) as assets:
        yield repository, assets


async def _run_upload(list_file: Path, config: UploadConfig) -> int:
    async with _open_services(config) as (repository, assets):
        process = BatchUploadProcess(repository, assets, config=config)
        BatchProgressDisplay().attach(process)
        try:
            await process.upload_from_list(list_file)
        except DiscoveryError as exc:
            raise CLIError(str(exc)) from exc
        except BatchUploadError as exc:
            console.print("[bold red]Upload failed[/bold red]")
            console.print(str(exc))
            return 1
    console.print("All photos uploaded successfully")
    return 0


async def _run_feature(numbers: str, config: UploadConfig) -> int:
    async with _open_services(config, with_assets=False) as (repository, _):
        result = await MarkFeaturedUseCase(repository, config).execute(numbers)
    for identifier in result.marked:
        console.print(f"Marked {identifier} as featured")
    for identifier in result.missing:
        console.print(f"[red]{identifier} not found[/red]")
    for token in result.invalid:
        console.print(f"[yellow]Ignored '{token}'[/yellow]")
    return 0


async def _run_clear_featured(config: UploadConfig) -> int:
    async with _open_services(config, with_assets=False) as (repository, _):
        count = await ClearFeaturedUseCase(repository).execute()
    console.print(f"All featured flags removed ({count})")
    return 0


async def _run_reset(config: UploadConfig) -> int:
    async with _open_services(config) as (repository, assets):
        result = await FullResetUseCase(repository, assets, config).execute()
    console.print(f"Metadata store cleared ({result.records_deleted} records)")
    console.print(f"Asset folder {config.asset_folder} wiped ({result.assets_deleted} assets)")
    return 0


def _confirm_reset(config: UploadConfig, ask: Callable[[str], str]) -> bool:
    console.print("\n[bold red]DANGER: This will DELETE ALL PHOTOS[/bold red]")
    return confirm_reset(ask, config.reset_policy, config.reset_token)


def _prompt(message: str) -> str:
    return Prompt.ask(message, console=console, default="", show_default=False)


def _run_menu(config: UploadConfig, ask: Callable[[str], str] = _prompt) -> int:
    """Interactive numbered menu. Uploading ends the session with its exit code."""
    while True:
        console.print(MENU)
        choice = ask("Select an option").strip()

        if choice == "1":
            list_file = ask("Enter path to text file with photo folders").strip()
            return asyncio.run(_run_upload(Path(list_file).expanduser(), config))
        if choice == "2":
            asyncio.run(_run_feature(ask("Enter image numbers to feature (example: 5001,5003,5010)"), config))
        elif choice == "3":
            asyncio.run(_run_clear_featured(config))
        elif choice == "4":
            if _confirm_reset(config, ask):
                asyncio.run(_run_reset(config))
        elif choice == "5":
            return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="portfolio-up",
        description="Upload photo folders to the portfolio and manage featured photos.",
    )
    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Load environment variables from this .env file (default: ./.env if present)",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logs")
    parser.add_argument("--silent", action="store_true", help="Only print errors")
    parser.add_argument(
        "--log-level",
        default=None,
        help="Explicit log level (DEBUG/INFO/WARNING/ERROR); falls back to LOG_LEVEL",
    )
    parser.add_argument("--version", action="version", version="portfolio-up 0.1.0")

    commands = parser.add_subparsers(dest="command")

    upload = commands.add_parser("upload", help="Upload every new photo from the listed folders")
    upload.add_argument("list_file", type=Path, help="Text file with one folder path per line")
    upload.add_argument("-j", "--concurrency", type=int, default=None, help="Units per window")

    feature = commands.add_parser("feature", help="Mark photos as featured")
    feature.add_argument("numbers", help="Comma separated photo numbers, e.g. 5,7,12")

    commands.add_parser("unfeature-all", help="Remove every featured flag")

    reset = commands.add_parser("reset", help="Delete all records and all uploaded assets")
    reset.add_argument("--yes", action="store_true", help="Skip the confirmation prompt")

    commands.add_parser("menu", help="Interactive menu (default)")
    return parser


def run_cli(argv: Optional[Sequence[str]] = None, ask: Callable[[str], str] = _prompt) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    used_env_file = args.env_file or _resolve_default_env_file()
    if used_env_file is not None:
        try:
            _load_env_file(Path(used_env_file))
        except CLIError as exc:
            print(f"ERROR: {exc}", file=sys.stderr)
            return 1

    effective_log_mode = _setup_logging(
        debug=args.debug,
        silent=args.silent,
        log_level=args.log_level,
    )

    concurrency = getattr(args, "concurrency", None)
    if concurrency is not None and concurrency < 1:
        print("ERROR: --concurrency must be >= 1", file=sys.stderr)
        return 1
    config = UploadConfig.from_env(concurrency=concurrency)
    command = args.command or "menu"

    render_configuration_summary(
        {
            "Command": command,
            "Firebase": os.getenv(FIREBASE_CREDENTIALS_ENV) or str(DEFAULT_FIREBASE_CREDENTIALS),
            "Cloudinary": os.getenv("CLOUDINARY_CLOUD_NAME") or "(missing)",
            "Asset Folder": config.asset_folder,
            "Collection": config.collection,
            "Identifiers": f"{config.id_prefix}-{'D' * config.id_width}",
            "Concurrency": config.concurrency,
            "Max Dimension": f"{config.max_dimension}px",
            "Reset Policy": config.reset_policy.value,
            "Env File": str(used_env_file) if used_env_file else "-",
            "Logging": effective_log_mode,
        }
    )

    try:
        if command == "upload":
            return asyncio.run(_run_upload(args.list_file.expanduser(), config))
        if command == "feature":
            return asyncio.run(_run_feature(args.numbers, config))
        if command == "unfeature-all":
            return asyncio.run(_run_clear_featured(config))
        if command == "reset":
            if not args.yes and not _confirm_reset(config, ask):
                print("Reset cancelled.", file=sys.stderr)
                return 1
            return asyncio.run(_run_reset(config))
        return _run_menu(config, ask)
    except (CLIError, PortfolioUploaderError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("Cancelled.", file=sys.stderr)
        return 130


def main() -> None:
    raise SystemExit(run_cli())


if __name__ == "__main__":
    main()
