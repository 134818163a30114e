#!/usr/bin/env python3
"""
cf-invalidation CLI - CloudFront invalidation operator

Runs the operator, or handles a single Invalidation resource on demand.
"""

import logging
import sys
from typing import Optional, Tuple

import click
import yaml

from cf_invalidation import __version__
from cf_invalidation.config.cli_config import (
    build_settings,
    get_default_config_path,
    load_config,
    validate_config,
)
from cf_invalidation.errors import HandlerError, InvalidationError
from cf_invalidation.models import Event
from cf_invalidation.utils.output import OutputFormatter, invalidation_row

LOG_FORMAT = '%(asctime)s %(levelname)s %(name)s: %(message)s'


class OperatorContext:
    """Context object passed to all commands"""

    def __init__(self):
        self.config = {}
        self.context = None
        self.output_format = 'table'
        self.verbose = False

    def get_settings(self, **overrides):
        """Effective settings: defaults, then config file, then options"""
        return build_settings(self.config, context=self.context, **overrides)

    def get_kube_client(self, settings):
        from cf_invalidation.utils.kubernetes import KubernetesClient

        return KubernetesClient(
            context=settings.context,
            group=settings.group,
            version=settings.version,
            plural=settings.plural,
        )


pass_context = click.make_pass_decorator(OperatorContext, ensure=True)


def setup_logging(verbose: bool, level: Optional[str] = None):
    if level:
        log_level = getattr(logging, level.upper())
    else:
        log_level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=log_level, format=LOG_FORMAT, stream=sys.stderr)


@click.group()
@click.version_option(version=__version__, prog_name='cf-invalidation')
@click.option('--config', '-c', 'config_path', envvar='CF_INVALIDATION_CONFIG',
              type=click.Path(exists=True),
              help='Path to config file (default: ./cf-invalidation.yaml or ~/.cf-invalidation/config.yaml)')
@click.option('--context', envvar='CF_INVALIDATION_CONTEXT',
              help='Kubeconfig context (ignored when running in-cluster)')
@click.option('--output', '-o', 'output_format',
              type=click.Choice(['table', 'json', 'yaml']),
              default='table',
              help='Output format (default: table)')
@click.option('--log-level', type=click.Choice(['debug', 'info', 'warning', 'error'], case_sensitive=False),
              help='Log level (default: info, debug with --verbose)')
@click.option('--verbose', '-v', is_flag=True,
              help='Enable verbose output')
@pass_context
def cli(ctx, config_path, context, output_format, log_level, verbose):
    """
    CloudFront invalidation operator

    Examples:

    \b
      # Run the operator for two namespaces
      cf-invalidation run -n web -n assets

    \b
      # Process one stored request now
      cf-invalidation invalidate web purge-images

    \b
      # Install the CustomResourceDefinition
      cf-invalidation crd | kubectl apply -f -
    """
    ctx.verbose = verbose
    ctx.output_format = output_format
    ctx.context = context
    setup_logging(verbose, log_level)

    config_path = config_path or get_default_config_path()
    if config_path:
        try:
            ctx.config = load_config(config_path)
        except (OSError, ValueError, yaml.YAMLError) as e:
            raise click.ClickException(f"Invalid config file: {e}")
        if ctx.verbose:
            click.echo(f"Loaded config from {config_path}", err=True)
        for issue in validate_config(ctx.config):
            click.echo(issue, err=True)


@cli.command()
@click.option('--namespace', '-n', 'namespaces', multiple=True,
              help='Namespace to watch (repeatable, default: from config)')
@click.option('--all-namespaces', '-A', is_flag=True, help='Watch all namespaces')
@click.option('--poll-interval', type=float, help='Seconds between status checks')
@click.option('--poll-timeout', type=float, help='Give up on an invalidation after this many seconds')
@pass_context
def run(ctx, namespaces: Tuple[str, ...], all_namespaces: bool,
        poll_interval: Optional[float], poll_timeout: Optional[float]):
    """Run the operator"""
    from cf_invalidation.operator import run_operator

    settings = ctx.get_settings(
        namespaces=list(namespaces) or None,
        poll_interval=poll_interval,
        poll_timeout=poll_timeout,
    )
    if all_namespaces:
        settings.namespaces = []

    run_operator(settings)


@cli.command()
@click.argument('namespace')
@click.argument('name')
@click.option('--poll-timeout', type=float, help='Give up after this many seconds')
@pass_context
def invalidate(ctx, namespace: str, name: str, poll_timeout: Optional[float]):
    """Process one Invalidation resource and wait for it to complete"""
    from cf_invalidation.operator import build_handler

    settings = ctx.get_settings(poll_timeout=poll_timeout)
    kube = ctx.get_kube_client(settings)
    formatter = OutputFormatter(ctx.output_format)

    try:
        request = kube.get_invalidation(namespace, name)
        if request.is_completed():
            click.echo(f"{namespace}/{name} already completed (id {request.status.id})", err=True)
            formatter.output(invalidation_row(request), title=f"{namespace}/{name}")
            return

        handler = build_handler(settings, kube=kube)
        result = handler.handle(Event(object=request))
        formatter.output(invalidation_row(result), title=f"{namespace}/{name}")

    except HandlerError as e:
        click.echo(f"Error: {e}", err=True)
        if ctx.output_format != 'table' and isinstance(e.cause, InvalidationError):
            formatter.output(e.cause.to_dict())
        sys.exit(1)
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        if ctx.verbose:
            import traceback
            traceback.print_exc()
        sys.exit(1)


@cli.command('list')
@click.option('--namespace', '-n', help='Namespace (default: all namespaces)')
@pass_context
def list_invalidations(ctx, namespace: Optional[str]):
    """List Invalidation resources"""
    settings = ctx.get_settings()
    kube = ctx.get_kube_client(settings)
    formatter = OutputFormatter(ctx.output_format)

    try:
        invalidations = kube.list_invalidations(namespace)
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    formatter.output_invalidations(invalidations)


@cli.command()
@pass_context
def crd(ctx):
    """Print the CustomResourceDefinition manifest"""
    from cf_invalidation.crd import build_crd

    fmt = 'json' if ctx.output_format == 'json' else 'yaml'
    OutputFormatter(fmt).output(build_crd(ctx.get_settings()))


@cli.command()
@pass_context
def config(ctx):
    """Show effective configuration"""
    formatter = OutputFormatter(ctx.output_format)
    info = ctx.get_settings().to_dict()
    info['config_file'] = ctx.config.get('_config_path', 'not loaded')
    formatter.output(info, title="Configuration")


def main():
    """Main entry point"""
    cli(auto_envvar_prefix='CF_INVALIDATION')


if __name__ == '__main__':
    main()
