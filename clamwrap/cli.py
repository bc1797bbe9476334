import asyncio
import logging
import sys
from pathlib import Path

import click
import yaml

from .config import ConfigManager
from .exceptions import ClamError, VirusDetected
from .models import ClamConfig, ScanStatus
from .scanner import ClamAVScanner
from .tool_manager import ToolManager


def _setup_logging(config: ClamConfig):
    """Setup logging configuration"""
    log_level = getattr(logging, config.log_level.upper())
    log_format = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

    handlers = [logging.StreamHandler()]
    if config.log_file:
        log_path = Path(config.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path))

    logging.basicConfig(level=log_level, format=log_format, handlers=handlers)


@click.group()
@click.option('--config', '-c', default=None, help='Configuration file path')
@click.pass_context
def cli(ctx, config):
    """ClamAV command-line wrapper"""
    ctx.ensure_object(dict)
    try:
        config_manager = ConfigManager(config)
    except FileNotFoundError as e:
        raise click.ClickException(str(e))
    ctx.obj['config_manager'] = config_manager
    ctx.obj['config'] = config_manager.get_config()
    _setup_logging(ctx.obj['config'])


@cli.command()
@click.argument('paths', nargs=-1, required=True)
@click.pass_context
def scan(ctx, paths):
    """Scan one or more files"""
    scanner = ClamAVScanner(ctx.obj['config'])
    exit_code = 0

    for path in paths:
        try:
            result = asyncio.run(scanner.scan(path))
        except VirusDetected as e:
            click.echo(f"{path}: FOUND {e.virus_type or ''}".rstrip())
            exit_code = max(exit_code, 1)
            continue
        except ClamError as e:
            click.echo(f"{path}: ERROR {e}", err=True)
            exit_code = 2
            continue

        if result.status == ScanStatus.CLEAN:
            click.echo(f"{path}: OK")
        elif result.status == ScanStatus.SKIPPED:
            click.echo(f"{path}: SKIPPED")
        else:
            click.echo(f"{path}: FOUND {result.virus_type or ''}".rstrip())
            exit_code = max(exit_code, 1)

    sys.exit(exit_code)


@cli.command()
@click.pass_context
def update(ctx):
    """Update virus definitions with freshclam"""
    scanner = ClamAVScanner(ctx.obj['config'])
    try:
        result = asyncio.run(scanner.freshclam())
    except ClamError as e:
        raise click.ClickException(str(e))

    if result.return_code is None:
        click.echo(f"Error: {result.error_message}", err=True)
        sys.exit(2)
    sys.exit(result.return_code)


@cli.command()
@click.pass_context
def version(ctx):
    """Show the ClamAV version"""
    scanner = ClamAVScanner(ctx.obj['config'])
    info = asyncio.run(scanner.version())
    if info is None:
        click.echo("ClamAV not available")
        sys.exit(1)
    click.echo(info)


@cli.command()
@click.pass_context
def tools(ctx):
    """Show which ClamAV executables are available"""
    tool_manager = ToolManager(ctx.obj['config'])
    click.echo("ClamAV Tools:")
    click.echo("=============")
    for name, tool in tool_manager.check_all_tools().items():
        status = str(tool.path) if tool.installed else "not found"
        click.echo(f"{name:<10} {status}")


@cli.group()
def config():
    """Configuration management"""
    pass


@config.command()
@click.pass_context
def show(ctx):
    """Show the effective configuration"""
    click.echo(yaml.dump(ctx.obj['config'].model_dump(mode="json"), default_flow_style=False))


@config.command(name='set')
@click.option('--key', '-k', required=True, help='Configuration key')
@click.option('--value', '-v', required=True, help='Configuration value')
@click.pass_context
def set_value(ctx, key, value):
    """Set a configuration value and save it"""
    config_manager = ctx.obj['config_manager']
    if config_manager.config_path is None:
        raise click.ClickException("No configuration file given (use --config)")

    try:
        config_manager.update_config({key: yaml.safe_load(value)})
    except ValueError as e:
        raise click.ClickException(str(e))
    click.echo(f"Set {key} = {value}")


if __name__ == '__main__':
    cli()
