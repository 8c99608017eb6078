"""CLI entrypoint for difftide."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import click

from difftide.app import StreamingDemoApp
from difftide.config.store import SettingsStore
from difftide.highlight.themes import ThemeNotFound, available_themes
from difftide.options import CollapseConfig, TokenizeOptions
from difftide.paths import settings_path
from difftide.pipeline import tokenize
from difftide.runtime_logging import configure_runtime_logging
from difftide.ui.ansi import render_ansi
from difftide.version import __version__


def _read(path: str) -> str:
    file_path = Path(path).expanduser()
    if not file_path.is_file():
        raise click.ClickException(f"File not found: {file_path}")
    return file_path.read_text(encoding="utf-8", errors="replace")


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("--log-level", default=None, help="off, error, warning, info or debug")
@click.option("--log-file", default=None, type=click.Path(dir_okay=False))
def main(log_level: str | None, log_file: str | None) -> None:
    """difftide: syntax-highlighted, streaming-aware code diffs."""
    configure_runtime_logging(level=log_level, log_file=log_file)


@main.command()
@click.argument("after")
@click.option("--diff-with", "before", help="File to diff against")
@click.option("--lang", help="Language name; detected from the file name when omitted")
@click.option("--theme", help="Pygments style name")
@click.option("--line-numbers", "line_numbers", flag_value="on", help="Show one line-number column")
@click.option("--both-line-numbers", "line_numbers", flag_value="both", help="Show old and new line numbers")
@click.option("--no-line-numbers", "line_numbers", flag_value="off")
@click.option("--collapse/--no-collapse", default=None, help="Collapse unchanged lines")
@click.option("--padding", type=click.IntRange(min=0), help="Unchanged lines kept around changes")
@click.option("--streaming", is_flag=True, help="Treat AFTER as a partially generated text")
@click.option("--window", type=click.IntRange(min=1), help="Streaming window height")
@click.option("--json", "as_json", is_flag=True, help="Print the tokenized structure as JSON")
@click.option("--color/--no-color", default=True, help="Keep ANSI colours when stdout is not a terminal")
def render(
    after: str,
    before: str | None,
    lang: str | None,
    theme: str | None,
    line_numbers: str | None,
    collapse: bool | None,
    padding: int | None,
    streaming: bool,
    window: int | None,
    as_json: bool,
    color: bool,
) -> None:
    """Render AFTER, optionally as a diff against another file."""
    settings = SettingsStore().load()
    if line_numbers is not None:
        settings.appearance.line_numbers = line_numbers  # type: ignore[assignment]

    if collapse is None:
        collapse = settings.diff.collapse_unchanged
    collapse_option: bool | CollapseConfig = False
    if collapse:
        collapse_option = CollapseConfig.from_template(
            settings.diff.separator,
            padding=padding if padding is not None else settings.diff.collapse_padding,
        )

    options = TokenizeOptions(
        code=_read(after),
        diff_with=_read(before) if before else None,
        lang=lang,
        file_path=after,
        theme=theme or settings.appearance.theme,
        collapse_unchanged=collapse_option,
        streaming=(window or settings.streaming.window) if streaming else False,
        line_numbers=settings.appearance.line_numbers_option(),
    )

    try:
        if as_json:
            code = asyncio.run(tokenize(options))
            click.echo(json.dumps(code.to_dict(), indent=2))
        else:
            click.echo(asyncio.run(render_ansi(options)), nl=False, color=color)
    except ThemeNotFound as exc:
        raise click.ClickException(f"{exc}. Run 'difftide themes' to list available themes.") from exc


@main.command()
@click.argument("before")
@click.argument("after")
@click.option("--seed", type=int, default=None, help="Seed for chunk sizes and delays")
def demo(before: str, after: str, seed: int | None) -> None:
    """Replay AFTER as a simulated stream diffed against BEFORE."""
    app = StreamingDemoApp(before=_read(before), after=_read(after), file_path=after, seed=seed)
    app.run()


@main.command()
def themes() -> None:
    """List available themes."""
    for name in available_themes():
        click.echo(name)


@main.command("settings-path")
def settings_path_command() -> None:
    """Print settings file path."""
    click.echo(str(settings_path()))


@main.command()
def about() -> None:
    """Show version and project summary."""
    payload = {
        "name": "difftide",
        "version": __version__,
        "description": "Syntax-highlighted, streaming-aware code diffs for terminals and custom renderers",
    }
    click.echo(json.dumps(payload, indent=2))


if __name__ == "__main__":
    main()
