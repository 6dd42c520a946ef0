"""
CLI for running and inspecting the activation recap bot
"""

import os
import sys
import json
import logging

import click

from rekapan.bot.application import create_service
from rekapan.bot.application import run as run_bot
from rekapan.config import Settings
from rekapan.export import render_csv, render_pdf
from rekapan.extraction import PROFILES, FieldExtractor
from rekapan.models import SHEET_HEADERS, normalize_identity
from rekapan.reporting.aggregator import aggregate
from rekapan.reporting.periods import now_in

logger = logging.getLogger(__name__)


def configure_logging(verbose: bool = False, log_file: str = ''):
    log_level = logging.DEBUG if verbose else logging.INFO
    handlers = [logging.StreamHandler()]
    if log_file:
        os.makedirs(os.path.dirname(log_file) or '.', exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding='utf-8'))

    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers
    )
    # Keep HTTP client chatter out of INFO logs
    logging.getLogger('httpx').setLevel(logging.WARNING)
    logging.getLogger('googleapiclient.discovery_cache').setLevel(logging.ERROR)


@click.group()
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.pass_context
def cli(ctx, verbose):
    """Rekapan Quality activation bot"""
    settings = Settings()
    configure_logging(verbose, settings.log_file_path)
    ctx.obj = settings


@cli.command()
@click.option('--webhook/--polling', default=None, help='Override the transport mode from the environment')
@click.pass_obj
def run(settings, webhook):
    """Start the Telegram bot"""
    try:
        run_bot(settings, use_webhook=webhook)
    except Exception as e:
        click.echo(f"Error starting bot: {e}", err=True)
        raise


@cli.command()
@click.argument('source', type=click.File('r', encoding='utf-8'), default='-')
@click.option('--profile', '-p', type=click.Choice(list(PROFILES)), default=None, help='Extraction profile')
@click.option('--username', '-u', default='', help='Submitting Telegram username')
@click.pass_obj
def parse(settings, source, profile, username):
    """Extract an activation record from a message file (or stdin)"""
    extractor = FieldExtractor(profile or settings.extraction_profile, tz_name=settings.timezone)
    record = extractor.extract(source.read(), username)
    click.echo(json.dumps(record.to_dict(), indent=2, ensure_ascii=False))


@cli.command()
@click.option('--period', '-p', type=click.Choice(['all', 'daily', 'weekly', 'monthly']), default='all')
@click.option('--date', '-d', 'explicit_date', default=None, help='Anchor date (DD/MM/YYYY)')
@click.pass_obj
def report(settings, period, explicit_date):
    """Print the technician ranking"""
    try:
        service = create_service(settings)
        click.echo(service.technician_ranking(None, period, explicit_date, check_access=False))
    except Exception as e:
        click.echo(f"Error generating report: {e}", err=True)
        raise


@cli.command()
@click.argument('output', type=click.Path(dir_okay=False, writable=True))
@click.option('--username', '-u', default=None, help='Only export records of this technician')
@click.option('--format', '-f', 'fmt', type=click.Choice(['pdf', 'csv']), default=None,
              help='Output format (default: from the file extension)')
@click.pass_obj
def export(settings, output, username, fmt):
    """Export stored activation records to PDF or CSV"""
    fmt = fmt or ('csv' if output.lower().endswith('.csv') else 'pdf')

    try:
        service = create_service(settings)
        identity = normalize_identity(username) if username else None
        result = aggregate(service.records.list_records(), identity_filter=identity)
        rows = [r.to_row() for r in result.records]

        if fmt == 'csv':
            with open(output, 'w', encoding='utf-8', newline='') as f:
                f.write(render_csv(SHEET_HEADERS, rows))
        else:
            render_pdf(SHEET_HEADERS, rows, output, generated_at=now_in(settings.timezone))

        click.echo(f"Exported {len(rows)} records to {output}")
    except Exception as e:
        click.echo(f"Error exporting records: {e}", err=True)
        raise


@cli.command('init-sheet')
@click.pass_obj
def init_sheet(settings):
    """Write the column header to an empty records worksheet"""
    service = create_service(settings)
    if service.records.ensure_header():
        click.echo(f"Header written to {settings.rekapan_sheet}")
    else:
        click.echo(f"{settings.rekapan_sheet} already has data, nothing written")


def main():
    cli(prog_name='rekapan-bot')


if __name__ == '__main__':
    sys.exit(main())
