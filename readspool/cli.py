#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Command-line interface for ReadSpool.

This module provides the main CLI entry point and all subcommands for
streaming, fetching and counting records of FASTA/FASTQ files.
"""

import json
import logging
import sys
from contextlib import nullcontext
from pathlib import Path
from typing import Any, Dict, Optional

import click
import yaml

from .version import __version__
from .annotation import SqliteAnnotationStore, open_annotation_store
from .config import ConfigParser, ConfigValidationError, resolve_gzipped, save_config_template
from .io import RandomAccessLoader, ReadSpoolError, Record, SequentialReader

logger = logging.getLogger(__name__)


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')
@click.option('--quiet', '-q', is_flag=True, help='Suppress non-error output')
@click.pass_context
def main(ctx, verbose, quiet):
    """
    ReadSpool: incremental FASTA/FASTQ record reader

    Streams records one at a time from plain or gzipped FASTA/FASTQ files,
    looks records up by ordinal, and attaches previously computed annotations.
    """
    ctx.ensure_object(dict)
    ctx.obj['VERBOSE'] = verbose
    ctx.obj['QUIET'] = quiet


# ============================================================================
# Helpers
# ============================================================================

def _configure_logging(ctx, config: Dict[str, Any]):
    """Set up root logging from CLI flags and the output.logging section."""
    log_config = config['output']['logging']
    if ctx.obj.get('VERBOSE'):
        level = logging.DEBUG
    elif ctx.obj.get('QUIET'):
        level = logging.ERROR
    else:
        level = getattr(logging, str(log_config.get('level', 'INFO')).upper())

    handlers = [logging.StreamHandler()]
    if log_config.get('log_file'):
        handlers.append(logging.FileHandler(log_config['log_file']))

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers,
        force=True,
    )


def _load_runtime_config(ctx, config_file: Optional[str],
                         overrides: Dict[str, Any]) -> Dict[str, Any]:
    """Load config, apply CLI overrides, validate and configure logging."""
    try:
        parser = ConfigParser(config_file)
        parser.merge_cli_overrides(overrides)
        parser.validate()
    except (ConfigValidationError, FileNotFoundError) as e:
        click.echo(f"✗ Configuration error: {e}", err=True)
        sys.exit(1)

    config = parser.to_dict()
    _configure_logging(ctx, config)
    return config


def _format_record(record: Record, output_format: str, line_width: int) -> str:
    if output_format == 'auto':
        output_format = 'fastq' if record.is_fastq else 'fasta'

    if output_format == 'fasta':
        return record.to_fasta_string(line_width)
    if output_format == 'fastq':
        return record.to_fastq_string()

    annotation = json.dumps(record.annotation) if record.annotation is not None else ''
    return (f"{record.ordinal}\t{record.name}\t{record.format.value}\t"
            f"{record.length}\t{annotation}\n")


def _reader_options(reads_file: str, config: Dict[str, Any]) -> Dict[str, Any]:
    return {
        'gzipped': resolve_gzipped(config['input']['gzipped'], reads_file),
        'encoding': config['input']['encoding'],
        'strict': config['parsing']['strict'],
    }


# ============================================================================
# Record Commands
# ============================================================================

@main.command()
@click.argument('reads_file', type=click.Path(exists=True, dir_okay=False))
@click.option('--output', '-o', type=click.Path(), default=None,
              help='Write records to this file instead of stdout')
@click.option('--format', '-f', 'output_format',
              type=click.Choice(['auto', 'fasta', 'fastq', 'tsv']), default=None,
              help='Output format (default: config output.format)')
@click.option('--limit', '-n', type=click.IntRange(min=0), default=None,
              help='Stop after this many records')
@click.option('--gzipped/--no-gzipped', default=None,
              help='Force gzip decompression on/off (default: from file suffix)')
@click.option('--strict', is_flag=True, help='Reject malformed records')
@click.option('--annotations', '-a', 'annotations_db', type=click.Path(exists=True),
              default=None, help='SQLite annotation database')
@click.option('--config', '-c', 'config_file', type=click.Path(exists=True),
              default=None, help='YAML configuration file')
@click.pass_context
def stream(ctx, reads_file, output, output_format, limit, gzipped, strict,
           annotations_db, config_file):
    """Stream records from READS_FILE in file order."""
    config = _load_runtime_config(ctx, config_file, {
        'input.gzipped': gzipped,
        'parsing.strict': strict or None,
        'annotations.backend': 'sqlite' if annotations_db else None,
        'annotations.path': annotations_db,
        'output.format': output_format,
    })
    output_format = config['output']['format']
    line_width = config['output']['line_width']

    written = 0
    try:
        store = open_annotation_store(config)
        try:
            with SequentialReader.open(reads_file, store=store,
                                       **_reader_options(reads_file, config)) as reader, \
                    (open(output, 'w') if output else nullcontext(sys.stdout)) as handle:
                for record in reader:
                    if limit is not None and record.ordinal > limit:
                        break
                    handle.write(_format_record(record, output_format, line_width))
                    written += 1
        finally:
            if store is not None:
                store.close()
    except ReadSpoolError as e:
        click.echo(f"✗ Error: {e}", err=True)
        sys.exit(1)
    except OSError as e:
        click.echo(f"✗ Error writing output: {e}", err=True)
        sys.exit(1)

    logger.info(f"Streamed {written} records from {reads_file}")


@main.command()
@click.argument('reads_file', type=click.Path(exists=True, dir_okay=False))
@click.argument('ordinal', type=int)
@click.option('--format', '-f', 'output_format',
              type=click.Choice(['auto', 'fasta', 'fastq', 'tsv']), default=None,
              help='Output format (default: config output.format)')
@click.option('--gzipped/--no-gzipped', default=None,
              help='Force gzip decompression on/off (default: from file suffix)')
@click.option('--strict', is_flag=True, help='Reject malformed records')
@click.option('--annotations', '-a', 'annotations_db', type=click.Path(exists=True),
              default=None, help='SQLite annotation database')
@click.option('--config', '-c', 'config_file', type=click.Path(exists=True),
              default=None, help='YAML configuration file')
@click.pass_context
def fetch(ctx, reads_file, ordinal, output_format, gzipped, strict, annotations_db,
          config_file):
    """Fetch the record at 1-based ORDINAL by re-scanning READS_FILE."""
    config = _load_runtime_config(ctx, config_file, {
        'input.gzipped': gzipped,
        'parsing.strict': strict or None,
        'annotations.backend': 'sqlite' if annotations_db else None,
        'annotations.path': annotations_db,
        'output.format': output_format,
    })

    if ordinal < 1:
        click.echo(f"✗ Error: ordinal must be >= 1, got {ordinal}", err=True)
        sys.exit(2)

    try:
        store = open_annotation_store(config)
        try:
            loader = RandomAccessLoader(reads_file, store=store,
                                        **_reader_options(reads_file, config))
            record = loader.load(ordinal)
        finally:
            if store is not None:
                store.close()
    except ReadSpoolError as e:
        click.echo(f"✗ Error: {e}", err=True)
        sys.exit(1)

    if record is None:
        click.echo(f"✗ Record {ordinal} not found in {reads_file}", err=True)
        sys.exit(1)

    click.echo(_format_record(record, config['output']['format'],
                              config['output']['line_width']), nl=False)


@main.command()
@click.argument('reads_file', type=click.Path(exists=True, dir_okay=False))
@click.option('--gzipped/--no-gzipped', default=None,
              help='Force gzip decompression on/off (default: from file suffix)')
@click.option('--strict', is_flag=True, help='Reject malformed records')
@click.option('--config', '-c', 'config_file', type=click.Path(exists=True),
              default=None, help='YAML configuration file')
@click.pass_context
def count(ctx, reads_file, gzipped, strict, config_file):
    """Count records and non-blank lines in READS_FILE."""
    config = _load_runtime_config(ctx, config_file, {
        'input.gzipped': gzipped,
        'parsing.strict': strict or None,
    })

    try:
        with SequentialReader.open(reads_file, **_reader_options(reads_file, config)) as reader:
            for _ in reader:
                pass
    except ReadSpoolError as e:
        click.echo(f"✗ Error: {e}", err=True)
        sys.exit(1)

    click.echo(f"records\t{reader.record_count}")
    click.echo(f"lines\t{reader.line_count}")


# ============================================================================
# Annotation Store Commands
# ============================================================================

@main.group()
def annotations():
    """Annotation store commands."""
    pass


@annotations.command('import')
@click.argument('db_file', type=click.Path())
@click.argument('jsonl_file', type=click.Path(exists=True, dir_okay=False))
@click.option('--table', default='annotations', help='Annotation table name')
def annotations_import(db_file, jsonl_file, table):
    """
    Load JSONL_FILE into the SQLite annotation store DB_FILE.

    Each line must be an object with 'ordinal' and 'annotation' keys.
    """
    entries = []
    with open(jsonl_file, 'r', encoding='utf-8') as f:
        for line_number, line in enumerate(f, 1):
            if not line.strip():
                continue
            try:
                item = json.loads(line)
                entries.append((int(item['ordinal']), item['annotation']))
            except (ValueError, KeyError, TypeError) as e:
                click.echo(f"✗ Invalid entry on line {line_number}: {e}", err=True)
                sys.exit(1)

    try:
        with SqliteAnnotationStore(db_file, table=table, readonly=False) as store:
            written = store.put_many(entries)
    except ReadSpoolError as e:
        click.echo(f"✗ Error: {e}", err=True)
        sys.exit(1)

    click.echo(f"✓ Imported {written} annotations into {db_file}")


# ============================================================================
# Configuration Management Commands
# ============================================================================

@main.group()
def config():
    """Configuration management commands."""
    pass


@config.command('init')
@click.option('--output', '-o', type=click.Path(), default='readspool_config.yaml',
              help='Output configuration file path')
def config_init(output):
    """Generate a template configuration file with all available parameters."""
    try:
        save_config_template(Path(output))
    except OSError as e:
        click.echo(f"✗ Error creating configuration: {e}", err=True)
        sys.exit(1)
    click.echo(f"✓ Configuration file created: {output}")


@config.command('validate')
@click.argument('config_file', type=click.Path(exists=True))
def config_validate(config_file):
    """Validate a configuration file."""
    click.echo(f"Validating configuration file: {config_file}")

    try:
        ConfigParser(config_file).validate()
    except ConfigValidationError as e:
        click.echo("✗ Configuration validation failed:", err=True)
        for error in str(e).split('; '):
            click.echo(f"  • {error}", err=True)
        sys.exit(1)

    click.echo("✓ Configuration is valid")


@config.command('show')
@click.argument('config_file', type=click.Path(exists=True))
@click.option('--format', '-f', type=click.Choice(['yaml', 'summary']), default='summary',
              help='Output format')
def config_show(config_file, format):
    """Display configuration settings."""
    try:
        config = ConfigParser(config_file).to_dict()
    except ConfigValidationError as e:
        click.echo(f"✗ Error reading configuration: {e}", err=True)
        sys.exit(1)

    if format == 'yaml':
        click.echo(yaml.dump(config, default_flow_style=False, sort_keys=False))
        return

    click.echo(f"Configuration from: {config_file}")
    click.echo("=" * 60)
    click.echo(f"  Gzipped input: {config['input']['gzipped']}")
    click.echo(f"  Encoding: {config['input']['encoding']}")
    click.echo(f"  Strict parsing: {config['parsing']['strict']}")
    click.echo(f"  Annotations: {config['annotations']['backend']}")
    if config['annotations']['backend'] != 'none':
        click.echo(f"    Path: {config['annotations']['path']}")
    click.echo(f"  Output format: {config['output']['format']}")
    click.echo(f"  Log level: {config['output']['logging']['level']}")


if __name__ == '__main__':
    main()
