"""Command line entry point for translation-autocomplete."""

import argparse
import asyncio
import logging
import sys
import textwrap
from pathlib import Path
from typing import Callable, List, Optional

import structlog
from dotenv import dotenv_values
from tqdm import tqdm

from translation_autocomplete import __version__
from translation_autocomplete.config import SUPPORTED_SERVICES, ensure_env_file, load_config, write_env_file
from translation_autocomplete.config.loader import DEFAULT_ENV_VALUES, ENV_KEYS
from translation_autocomplete.config.settings import Settings
from translation_autocomplete.errors import TranslationToolError, log_errors
from translation_autocomplete.localization import MissingEntry, ResourceStore, sanitize_key
from translation_autocomplete.translation import FixPipeline, FixReport, ProgressEvent, check_translations, create_provider

USAGE_EXAMPLES = """
  Available Commands:

  - check          Check for missing translations
  - check --fix    Automatically complete missing translations
  - config         Update configuration via CLI
  - key TEXT       Suggest a translation key for a piece of text
  - help           Show help screen

  Usage Examples:
  $ translation-autocomplete check
  $ translation-autocomplete check --fix
  $ translation-autocomplete check --fix --batch
  $ translation-autocomplete config
"""


def setup_logging(debug: bool = False) -> None:
    """Configure structured logging."""
    level = logging.DEBUG if debug else logging.WARNING

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    # stdout belongs to the progress bar and the results table
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))

    logging.basicConfig(
        level=level,
        handlers=[handler],
        force=True,
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            (
                structlog.dev.ConsoleRenderer(colors=True)
                if debug
                else structlog.processors.JSONRenderer()
            ),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="translation-autocomplete",
        description="i18n translation autocomplete tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=USAGE_EXAMPLES,
    )

    parser.add_argument(
        "--version", action="version", version=f"translation-autocomplete {__version__}"
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--env-file", type=Path, default=Path(".env"), help="Path to the .env file")

    commands = parser.add_subparsers(dest="command")

    check = commands.add_parser("check", help="Check for missing translations")
    check.add_argument("--fix", action="store_true", help="Automatically complete missing translations")
    check.add_argument(
        "--batch",
        action="store_true",
        help="With --fix: translate each language in concurrent batches and write it once",
    )

    commands.add_parser("config", help="Update configuration settings via CLI")

    key = commands.add_parser("key", help="Suggest a translation key for a piece of text")
    key.add_argument("text", nargs="+")

    commands.add_parser("help", help="Shows command list and usage examples")

    return parser.parse_args(argv)


def format_missing(entries: List[MissingEntry]) -> str:
    width = max(len(entry.key) for entry in entries)
    return "\n".join(
        f"  {entry.key.ljust(width)}  {', '.join(entry.missing_languages)}" for entry in entries
    )


def render_table(report: FixReport, widths=(30, 40, 40)) -> str:
    """Results table: key, source text, translation per language."""

    def cell(text: str, width: int) -> str:
        return textwrap.shorten(text, width=width, placeholder="…").ljust(width)

    def row(*cells: str) -> str:
        return "│ " + " │ ".join(cell(c, w) for c, w in zip(cells, widths)) + " │"

    def rule(left: str, join: str, right: str) -> str:
        return left + join.join("─" * (w + 2) for w in widths) + right

    lines = [rule("┌", "┬", "┐"), row("🔑 Key", "📝 Source Text", "🌍 Translation"), rule("├", "┼", "┤")]
    for entry in report.entries:
        for language in entry.missing_languages:
            translation = report.translation_for(entry.key, language)
            result = f"✓ {language}: {translation}" if translation else f"❌ {language}: Translation failed"
            lines.append(row(entry.key, entry.source_value, result))
    lines.append(rule("└", "┴", "┘"))
    return "\n".join(lines)


def progress_printer(bar: tqdm) -> Callable[[ProgressEvent], None]:
    def on_progress(event: ProgressEvent) -> None:
        bar.total = event.total
        bar.n = event.completed
        bar.set_postfix_str(f"{event.language}:{event.current_key}", refresh=False)
        bar.refresh()

    return on_progress


@log_errors(level="debug", operation_name="check")
async def run_check(settings: Settings, fix: bool = False, batch: bool = False) -> int:
    store = ResourceStore(settings.i18n_dir)

    print("\n🔍 Scanning for missing translations...\n")
    entries = await check_translations(settings, store)

    if not entries:
        print("✅ No missing translations found!\n")
        return 0

    print(f"📊 Found {len(entries)} missing translations.\n")

    if not fix:
        print(format_missing(entries))
        print("\n💡 To complete translations, run: translation-autocomplete check --fix\n")
        return 0

    print("🚀 Starting translations...\n")
    async with create_provider(settings) as provider:
        pipeline = FixPipeline(settings, store, provider.translate)
        with tqdm(total=len(entries), desc="🔄 Progress", ncols=80, ascii="░█") as bar:
            on_progress = progress_printer(bar)
            if batch:
                report = await pipeline.fix_batched(on_progress)
            else:
                report = await pipeline.fix(on_progress)

    print("\n📋 Translation Results:\n")
    print(render_table(report))
    if report.failed:
        print(f"\n⚠️ {len(report.failed)} of {report.attempted} translations failed.")
    print("\n✅ Translation process completed!\n")
    return 0


def run_config(env_file: Path, ask: Callable[[str], str] = input) -> int:
    """Interactively update the env file."""
    if ensure_env_file(env_file):
        print("⚠️ .env file not found, created it with default settings.")

    current = {**DEFAULT_ENV_VALUES}
    stored = dotenv_values(env_file)
    for field_name, env_name in ENV_KEYS.items():
        if stored.get(env_name):
            current[field_name] = stored[env_name]
    if isinstance(current["target_languages"], str):
        current["target_languages"] = current["target_languages"].split(",")

    print("\n🌍 Update Translation Settings\n")

    api_key = ask(f"Enter new API Key (current: {current['api_key'] or 'NONE'}): ").strip()
    if not api_key:
        print("❌ API Key cannot be empty!")
        return 1

    source_language = ask(f"Enter source language code (current: {current['source_language']}): ").strip()
    target_languages = ask(
        f"Enter target languages (comma-separated) (current: {', '.join(current['target_languages'])}): "
    ).strip()
    service = ask(
        f"Select API service ({', '.join(SUPPORTED_SERVICES)}) (current: {current['translation_service']}): "
    ).strip()
    i18n_path = ask(f"Enter i18n directory path (current: {current['i18n_path']}): ").strip()

    if service and service not in SUPPORTED_SERVICES:
        print(f"❌ Unsupported service: {service}")
        return 1

    write_env_file(env_file, {
        "api_key": api_key,
        "source_language": source_language or current["source_language"],
        "target_languages": (
            [lang.strip() for lang in target_languages.split(",") if lang.strip()]
            if target_languages else current["target_languages"]
        ),
        "translation_service": service or current["translation_service"],
        "i18n_path": i18n_path or current["i18n_path"],
    })

    print("\n✅ Configuration updated successfully!")
    return 0


async def main(argv: Optional[List[str]] = None) -> int:
    """Main application entry point."""
    args = parse_args(argv)
    setup_logging(debug=args.debug)

    logger = structlog.get_logger()
    logger.debug("Starting translation-autocomplete", version=__version__, command=args.command)

    if args.command == "config":
        return run_config(args.env_file)

    if args.command == "key":
        print(sanitize_key(" ".join(args.text)))
        return 0

    if args.command != "check":
        print(USAGE_EXAMPLES)
        return 0

    try:
        settings = load_config(env_file=args.env_file)
        return await run_check(settings, fix=args.fix, batch=args.batch)
    except TranslationToolError as e:
        print(f"\n❌ Error: {e.user_message}\n", file=sys.stderr)
        return 1
    except Exception as e:
        logger.exception("Unexpected error", error=str(e))
        print("\n❌ An unexpected error occurred\n", file=sys.stderr)
        return 1


def run() -> None:
    """Synchronous entry point for setuptools."""
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        print("\nInterrupted, translations written so far are kept")
        sys.exit(130)


if __name__ == "__main__":
    run()
