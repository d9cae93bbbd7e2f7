"""Main CLI entry point for Gist Mirror."""

import sys
import asyncio
from typing import Any, Dict, List, Optional
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .. import __version__
from ..config.config import Config, MirrorMode
from ..exceptions import ConfigurationError
from ..migration.engine import MirrorEngine
from ..migration.state import MirrorSummary
from ..models.snippet import Snippet
from ..utils.logging import setup_logging

console = Console()
# Errors stay on one line regardless of terminal width
err_console = Console(stderr=True, soft_wrap=True, highlight=False)

DEFAULT_CONFIG_PATHS = ['gist-mirror.yaml', 'gist-mirror.yml', '.gist-mirror.yaml']


def _github_options(func):
    func = click.option(
        '--github-throttle',
        type=float,
        help='Throttle time in milliseconds between API calls (default: 4000).',
    )(func)
    func = click.option(
        '--github-token',
        help='GitHub token (default: $GITHUB_TOKEN).',
    )(func)
    return func


def _filter_options(func):
    func = click.option(
        '--gist-filename-match', help='Regex to match gist filename.'
    )(func)
    func = click.option(
        '--gist-description-match', help='Regex to match gist description.'
    )(func)
    return func


def _rewrite_options(func):
    func = click.option(
        '--repo-description-replace',
        help=r'Replace repo description (re syntax, \g<0> is the match).',
    )(func)
    func = click.option(
        '--repo-description-match', help='Regex to match repo description.'
    )(func)
    func = click.option(
        '--repo-name-replace',
        help=r'Replace repo name (re syntax, \g<0> is the match).',
    )(func)
    func = click.option('--repo-name-match', help='Regex to match repo name.')(func)
    return func


@click.group()
@click.version_option(version=__version__, prog_name='gist-mirror')
@click.option(
    '--config',
    '-c',
    type=click.Path(exists=True),
    help='Path to configuration file',
)
@click.option(
    '--verbose',
    '-v',
    is_flag=True,
    help='Enable verbose logging',
)
@click.pass_context
def cli(ctx: click.Context, config: Optional[str], verbose: bool) -> None:
    """Gist Mirror - Mirror your public gists into repositories of a GitHub org."""
    ctx.ensure_object(dict)

    if config:
        ctx.obj['config_path'] = config
    ctx.obj['verbose'] = verbose

    # Basic logging until the configuration is known
    setup_logging('DEBUG' if verbose else 'INFO')


@cli.command()
@click.option(
    '--output',
    '-o',
    default='gist-mirror.yaml',
    help='Output configuration file path',
)
def init(output: str) -> None:
    """Initialize a new configuration file."""
    try:
        Config.create_template(output)

        console.print(f'[green]✓[/green] Configuration template created at: {output}')
        console.print(
            f'[yellow]Please edit {output} with your organization and token[/yellow]'
        )

    except OSError as e:
        err_console.print(
            f'[red]✗[/red] Failed to create configuration: {escape(str(e))}'
        )
        sys.exit(1)


@cli.command()
@_filter_options
@_github_options
@click.pass_context
def find(ctx: click.Context, **options: Any) -> None:
    """List public gists matching the filters."""
    config = _load_config_or_exit(ctx, _overrides(**options), require_org=False)
    _setup_logging_with_config(ctx, config)

    try:
        snippets = asyncio.run(MirrorEngine(config).find())
    except Exception as e:
        err_console.print(f'[red]✗[/red] Discovery failed: {escape(str(e))}')
        if ctx.obj.get('verbose'):
            err_console.print_exception()
        sys.exit(1)

    _display_snippets(snippets)


@cli.command()
@click.argument('org', required=False)
@click.option(
    '--mode',
    type=click.Choice([m.value for m in MirrorMode]),
    help='mirror: leave source gists alone; conceal: empty and delete them.',
)
@_filter_options
@_rewrite_options
@_github_options
@click.pass_context
def mirror(ctx: click.Context, org: Optional[str], **options: Any) -> None:
    """Mirror matching gists into repositories of ORG."""
    config = _load_config_or_exit(ctx, _overrides(org=org, **options))
    _setup_logging_with_config(ctx, config)

    console.print(
        Panel.fit(
            f'[bold blue]Gist Mirror[/bold blue]\n'
            f'Mode: {config.mode.value}, organization: {config.org}',
            border_style='blue',
        )
    )

    try:
        summary = asyncio.run(MirrorEngine(config).run())
    except Exception as e:
        err_console.print(f'[red]✗[/red] Mirror failed: {escape(str(e))}')
        if ctx.obj.get('verbose'):
            err_console.print_exception()
        sys.exit(1)

    _display_summary(summary)
    if summary.failed:
        sys.exit(1)


def _overrides(
    org: Optional[str] = None,
    mode: Optional[str] = None,
    github_token: Optional[str] = None,
    github_throttle: Optional[float] = None,
    gist_description_match: Optional[str] = None,
    gist_filename_match: Optional[str] = None,
    repo_name_match: Optional[str] = None,
    repo_name_replace: Optional[str] = None,
    repo_description_match: Optional[str] = None,
    repo_description_replace: Optional[str] = None,
) -> Dict[str, Any]:
    """Map command-line flags onto the configuration layout."""
    return {
        'org': org,
        'mode': mode,
        'github': {'token': github_token, 'throttle': github_throttle},
        'filters': {
            'description_match': gist_description_match,
            'filename_match': gist_filename_match,
        },
        'rewrite': {
            'name_match': repo_name_match,
            'name_replace': repo_name_replace,
            'description_match': repo_description_match,
            'description_replace': repo_description_replace,
        },
    }


def _load_config(
    ctx: click.Context, overrides: Dict[str, Any], require_org: bool = True
) -> Config:
    """Load configuration from file, environment and flags."""
    config_path = ctx.obj.get('config_path')

    if not config_path:
        for path in DEFAULT_CONFIG_PATHS:
            if Path(path).exists():
                config_path = path
                break

    return Config.load(config_path, overrides=overrides, require_org=require_org)


def _load_config_or_exit(
    ctx: click.Context, overrides: Dict[str, Any], require_org: bool = True
) -> Config:
    try:
        return _load_config(ctx, overrides, require_org=require_org)
    except ConfigurationError as e:
        err_console.print(f'[red]✗[/red] {escape(str(e))}')
        sys.exit(1)


def _setup_logging_with_config(ctx: click.Context, config: Config) -> None:
    """Setup logging with configuration from config file."""
    verbose = ctx.obj.get('verbose', False)

    log_level = 'DEBUG' if verbose else config.logging.level
    setup_logging(
        level=log_level, log_file=config.logging.file, log_format=config.logging.format
    )


def _display_snippets(snippets: List[Snippet]) -> None:
    """Display discovered gists."""
    table = Table(title=f'Matching Gists ({len(snippets)})')
    table.add_column('ID', style='cyan')
    table.add_column('Description', style='white')
    table.add_column('Files', style='green')
    table.add_column('URL', style='blue')

    for snippet in snippets:
        table.add_row(
            snippet.id,
            snippet.description or '',
            ', '.join(snippet.filenames),
            snippet.html_url or '',
        )

    console.print(table)


def _display_summary(summary: MirrorSummary) -> None:
    """Display mirror summary results."""
    table = Table(title='Mirror Summary')
    table.add_column('Gist', style='cyan')
    table.add_column('Result', style='green')

    for pair in summary.pairs:
        table.add_row(pair.source.id, pair.describe())
    for failure in summary.failures:
        table.add_row(failure.snippet.id, f'[red]{failure.error_message}[/red]')

    console.print(table)
    console.print(
        f'[blue]Total:[/blue] {summary.total}  '
        f'[green]Successful:[/green] {summary.successful}  '
        f'[red]Failed:[/red] {summary.failed}'
    )

    if summary.completed_at:
        duration = summary.completed_at - summary.started_at
        console.print(f'[blue]Duration:[/blue] {duration}')


def main() -> None:
    """Main entry point for the CLI application."""
    try:
        cli()
    except KeyboardInterrupt:
        err_console.print('\n[red]Mirror interrupted by user[/red]')
        sys.exit(1)


if __name__ == '__main__':
    main()
