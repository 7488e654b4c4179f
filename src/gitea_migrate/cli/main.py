"""Main CLI entry point for Gitea Migration Tool."""

import sys
from typing import Any, Dict, List, Optional
from pathlib import Path

import click
from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..config.config import Config
from ..exceptions import FetchError
from ..git.operations import GitOperations
from ..migration.engine import MigrationEngine
from ..models.repository import RepoDescriptor
from ..models.stats import MigrationStats
from ..utils.logging import setup_logging

console = Console()

DEFAULT_CONFIG_PATHS = ['config.yaml', 'config.yml', '.gitea-migrate.yaml']


@click.group()
@click.version_option(version='0.1.0', prog_name='gitea-migrate')
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
    """Gitea Migration Tool - Copy repositories from GitHub to Gitea."""
    ctx.ensure_object(dict)

    if config:
        ctx.obj['config_path'] = config
    ctx.obj['verbose'] = verbose

    # Setup basic logging first (will be enhanced later with config)
    setup_logging('DEBUG' if verbose else 'INFO')


@cli.command()
@click.option(
    '--output',
    '-o',
    default='config.yaml',
    help='Output configuration file path',
)
def init(output: str) -> None:
    """Initialize a new configuration file."""
    console.print(
        Panel.fit(
            '[bold green]Gitea Migration Tool[/bold green]\n'
            'Initializing configuration...',
            border_style='green',
        )
    )

    try:
        Config.create_template(output)

        console.print(f'[green]✓[/green] Configuration template created at: {output}')
        console.print(
            f'[yellow]Please edit {output} with your GitHub and Gitea details[/yellow]'
        )

    except OSError as e:
        console.print(f'[red]✗[/red] Failed to create configuration: {e}')
        sys.exit(1)


@cli.command()
@click.option('--github-user', help='GitHub username whose repositories are copied')
@click.option('--gitea-url', help='Gitea URL')
@click.option('--gitea-username', help='Gitea username')
@click.option(
    '--gitea-token',
    envvar='GITEA_TOKEN',
    help='Gitea API token (defaults to $GITEA_TOKEN)',
)
@click.option('--migrate-forks', is_flag=True, help='Include forks')
@click.option(
    '--retries',
    type=click.IntRange(min=1),
    help='Attempts per repository (default: 2)',
)
@click.option(
    '--dry-run',
    is_flag=True,
    help='List repositories without migrating them',
)
@click.pass_context
def migrate(
    ctx: click.Context,
    github_user: Optional[str],
    gitea_url: Optional[str],
    gitea_username: Optional[str],
    gitea_token: Optional[str],
    migrate_forks: bool,
    retries: Optional[int],
    dry_run: bool,
) -> None:
    """Copy every repository of the source account to Gitea."""
    console.print(
        Panel.fit(
            '[bold blue]Gitea Migration Tool[/bold blue]\n'
            'Starting migration process...',
            border_style='blue',
        )
    )

    if dry_run:
        console.print(
            '[yellow]Running in dry-run mode - no changes will be made[/yellow]'
        )

    overrides = {
        'source': {'user': github_user},
        'destination': {
            'url': gitea_url,
            'user': gitea_username,
            'token': gitea_token,
        },
        'migration': {
            'include_forks': True if migrate_forks else None,
            'max_attempts': retries,
            'dry_run': True if dry_run else None,
        },
    }

    try:
        config = _load_config(ctx, overrides)
        _setup_logging_with_config(ctx, config)

        if not GitOperations(config.git).is_available():
            console.print('[red]✗[/red] Error: git not found')
            sys.exit(1)

        if config.migration.dry_run:
            repositories = _run_dry_run(config)
            _display_dry_run(repositories)
            return

        stats = _run_migration(config)

    except FetchError as e:
        console.print(f'[red]✗[/red] Failed to list source repositories: {e}')
        sys.exit(1)
    except (FileNotFoundError, ValueError, ValidationError) as e:
        console.print(f'[red]✗[/red] Invalid configuration: {e}')
        sys.exit(1)

    _display_migration_summary(stats)
    if stats.failed:
        sys.exit(1)


@cli.command()
@click.pass_context
def validate(ctx: click.Context) -> None:
    """Check connectivity to both services and git availability."""
    console.print(
        Panel.fit(
            '[bold cyan]Gitea Migration Tool[/bold cyan]\nValidating setup...',
            border_style='cyan',
        )
    )

    try:
        config = _load_config(ctx)

        engine = MigrationEngine(config)
        try:
            engine.test_connectivity()
        finally:
            engine.close()

        console.print('[green]✓[/green] Connectivity validation passed')
        console.print('[green]✓[/green] Configuration validation completed')

    except (ConnectionError, FileNotFoundError, ValueError, ValidationError) as e:
        console.print(f'[red]✗[/red] Validation failed: {e}')
        if ctx.obj.get('verbose'):
            console.print_exception()
        sys.exit(1)


@cli.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show the effective migration configuration."""
    console.print(
        Panel.fit(
            '[bold magenta]Gitea Migration Tool[/bold magenta]\nMigration Status',
            border_style='magenta',
        )
    )

    try:
        config = _load_config(ctx)
    except (FileNotFoundError, ValueError, ValidationError) as e:
        console.print(f'[red]✗[/red] Failed to load status: {e}')
        sys.exit(1)

    table = Table(title='Migration Configuration')
    table.add_column('Setting', style='cyan')
    table.add_column('Value', style='green')

    table.add_row('Source', f'{config.source.kind} ({config.source.url})')
    table.add_row('Source User', config.source.user)
    table.add_row('Source Token', 'set' if config.source.token else 'not set')
    table.add_row('Destination URL', config.destination.url)
    table.add_row('Destination User', config.destination.user)
    table.add_row('Destination Token', 'set' if config.destination.token else 'not set')
    table.add_row('Migrate Forks', '✓' if config.migration.include_forks else '✗')
    table.add_row('Attempts', str(config.migration.max_attempts))
    table.add_row('Retry Delay', f'{config.migration.retry_delay}s')
    table.add_row('Temp Directory', config.git.temp_dir or '(system default)')

    console.print(table)


def _load_config(
    ctx: click.Context, overrides: Optional[Dict[str, Dict[str, Any]]] = None
) -> Config:
    """Load configuration from file or environment, then apply CLI overrides."""
    config_path = ctx.obj.get('config_path')

    if not config_path:
        for path in DEFAULT_CONFIG_PATHS:
            if Path(path).exists():
                config_path = path
                break

    return Config.load(config_path, overrides)


def _setup_logging_with_config(ctx: click.Context, config: Config) -> None:
    """Setup logging with configuration from config file."""
    verbose = ctx.obj.get('verbose', False)

    # Use config logging settings, but allow verbose flag to override level
    log_level = 'DEBUG' if verbose else config.logging.level
    setup_logging(
        level=log_level,
        log_file=config.logging.file,
        log_format=config.logging.format,
    )


def _run_migration(config: Config) -> MigrationStats:
    engine = MigrationEngine(config)
    with console.status('[blue]Migration in progress...'):
        return engine.migrate()


def _run_dry_run(config: Config) -> List[RepoDescriptor]:
    engine = MigrationEngine(config)
    return engine.dry_run()


def _display_dry_run(repositories: List[RepoDescriptor]) -> None:
    table = Table(title=f'Repositories to migrate ({len(repositories)})')
    table.add_column('Name', style='cyan')
    table.add_column('Visibility', style='blue')
    table.add_column('Fork', style='yellow')
    table.add_column('Description')

    for repository in repositories:
        table.add_row(
            repository.name,
            'private' if repository.private else 'public',
            '✓' if repository.fork else '',
            repository.truncated_description,
        )

    console.print(table)


def _display_migration_summary(stats: MigrationStats) -> None:
    """Display migration summary results."""
    table = Table(title='Migration Summary')
    table.add_column('Total', style='blue')
    table.add_column('Success', style='green')
    table.add_column('Failed', style='red')
    table.add_column('Failed Attempts', style='yellow')

    table.add_row(
        str(stats.total),
        str(stats.success),
        str(stats.failed),
        str(stats.failed_attempts),
    )
    console.print(table)

    if stats.duration is not None:
        console.print(f'\n[blue]Migration Duration:[/blue] {stats.duration}')

    if stats.failed_names:
        console.print(f'\n[red]Failed repos ({len(stats.failed_names)}):[/red]')
        for name in stats.failed_names:
            console.print(f'  • {name}')

    if stats.recovered_names:
        console.print(
            f'\n[yellow]Migrated after retry ({len(stats.recovered_names)}):[/yellow]'
        )
        for name in stats.recovered_names:
            console.print(f'  • {name}')


def main() -> None:
    """Main entry point for the CLI application."""
    try:
        cli()
    except KeyboardInterrupt:
        console.print('\n[red]Migration interrupted by user[/red]')
        sys.exit(1)


if __name__ == '__main__':
    main()
