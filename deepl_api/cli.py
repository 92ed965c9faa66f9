"""
Command line utility for the DeepL API.

Usage:
    deepl translate -t EN-US "Hallo Welt"
    deepl translate -t DE --input-file texts.txt
    deepl languages --target
    deepl usage

The API key is read from --api-key or the DEEPL_API_KEY environment variable.
"""

import asyncio
import logging
from enum import Enum
from pathlib import Path
from typing import Annotated, List, NoReturn, Optional

import aiofiles
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from . import __version__
from .translator import (
    DeepL,
    Formality,
    SplitSentences,
    TranslatableTextList,
    TranslationOptions,
)
from .utils import APIConfig, DeepLError, FileError, InvalidInputError

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="deepl",
    help="Translate text and inspect your account with the DeepL API.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)


class SplitMode(str, Enum):
    none = "none"
    punctuation = "punctuation"
    newlines = "newlines"


_SPLIT_MODES = {
    SplitMode.none: SplitSentences.NONE,
    SplitMode.punctuation: SplitSentences.PUNCTUATION,
    SplitMode.newlines: SplitSentences.PUNCTUATION_AND_NEWLINES,
}


class FormalityMode(str, Enum):
    default = "default"
    more = "more"
    less = "less"


def _fail(message: str) -> NoReturn:
    err_console.print(f"[bold red]❌ {escape(message)}[/bold red]", soft_wrap=True)
    raise typer.Exit(code=1)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"deepl_api {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    api_key: Annotated[
        Optional[str], typer.Option("--api-key", help="DeepL API key (default: $DEEPL_API_KEY).")
    ] = None,
    free: Annotated[
        Optional[bool],
        typer.Option("--free/--pro", help="Use the free or the pro endpoint (default: detect from key)."),
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging.")] = False,
    version: Annotated[
        Optional[bool],
        typer.Option("--version", callback=_version_callback, is_eager=True, help="Show the version and exit."),
    ] = None,
):
    """Translate text and inspect your account with the DeepL API."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=err_console, show_path=False)],
        )

    try:
        config = APIConfig.from_env()
    except InvalidInputError as e:
        _fail(str(e))

    if api_key is not None:
        config.api_key = api_key
    if free is not None:
        config.free_tier = free
    ctx.obj = config


def _run(ctx: typer.Context, operation):
    """Create a client from the context config and run one async operation with it."""
    config: APIConfig = ctx.obj

    async def runner():
        async with DeepL(config=config) as deepl:
            return await operation(deepl)

    try:
        return asyncio.run(runner())
    except DeepLError as e:
        logger.debug(f"Command failed with {e.kind.value} error")
        _fail(str(e))


async def _read_texts(path: Path) -> List[str]:
    """Read one text per non-empty line."""
    try:
        async with aiofiles.open(path, "r", encoding="utf-8") as f:
            content = await f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise FileError(f"Cannot read input file {path}: {e}", original_error=e)
    return [line for line in content.splitlines() if line.strip()]


@app.command("translate")
def translate(
    ctx: typer.Context,
    target: Annotated[str, typer.Option("--target", "-t", help="Target language, e.g. EN-US.")],
    texts: Annotated[Optional[List[str]], typer.Argument(help="Texts to translate.")] = None,
    source: Annotated[
        Optional[str], typer.Option("--source", "-s", help="Source language (default: auto-detect).")
    ] = None,
    input_file: Annotated[
        Optional[Path], typer.Option("--input-file", "-i", help="Read texts from a file, one per line.")
    ] = None,
    formality: Annotated[Optional[FormalityMode], typer.Option(help="Desired formality.")] = None,
    split_sentences: Annotated[
        Optional[SplitMode], typer.Option(help="Split input into sentences before translating.")
    ] = None,
    preserve_formatting: Annotated[
        Optional[bool],
        typer.Option("--preserve-formatting/--no-preserve-formatting", help="Respect the original formatting."),
    ] = None,
):
    """Translate texts and print one translation per line."""
    options = TranslationOptions(
        split_sentences=_SPLIT_MODES[split_sentences] if split_sentences else None,
        preserve_formatting=preserve_formatting,
        formality=Formality(formality.value) if formality else None,
    )

    async def operation(deepl: DeepL):
        all_texts = list(texts or [])
        if input_file is not None:
            all_texts.extend(await _read_texts(input_file))
        text_list = TranslatableTextList(
            target_language=target,
            texts=all_texts,
            source_language=source,
        )
        return await deepl.translate(text_list, options)

    for item in _run(ctx, operation):
        console.print(item.text, soft_wrap=True, markup=False, highlight=False)


@app.command("languages")
def languages(
    ctx: typer.Context,
    target: Annotated[bool, typer.Option("--target", help="List target instead of source languages.")] = False,
):
    """List the languages supported by DeepL."""

    async def operation(deepl: DeepL):
        if target:
            return await deepl.target_languages()
        return await deepl.source_languages()

    result = _run(ctx, operation)

    table = Table(title="Target languages" if target else "Source languages")
    table.add_column("Code", style="cyan", no_wrap=True)
    table.add_column("Name")
    if target:
        table.add_column("Formality")
    for language in result:
        row = [language.language, language.name]
        if target:
            row.append("yes" if language.supports_formality else "no")
        table.add_row(*row)
    console.print(table)


@app.command("usage")
def usage(ctx: typer.Context):
    """Show characters used and the limit of the current billing period."""

    async def operation(deepl: DeepL):
        return await deepl.usage_information()

    info = _run(ctx, operation)
    console.print(
        f"Characters: {info.character_count:,} / {info.character_limit:,} "
        f"({info.characters_remaining:,} remaining)",
        soft_wrap=True,
        highlight=False,
    )
    if info.limit_reached:
        err_console.print("[yellow]Character limit reached.[/yellow]")


if __name__ == "__main__":
    app()
