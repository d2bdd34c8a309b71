"""
Command Line Interface for the replicated file store
"""
import os
import sys
import click
from pydantic import ValidationError
from distributed_fs.core.config import Config, ClusterConfig, StorageConfig
from distributed_fs.core.manager import ReplicationManager
from distributed_fs.shell import CommandDispatcher
from distributed_fs.utils.helpers import format_file_size, get_disk_usage, scan_node_directories
from distributed_fs.utils.logger import get_logger, setup_logging


logger = get_logger(__name__)


def _load_config(config_file):
    if config_file:
        return Config.load_from_file(config_file)
    return Config.from_env()


def _override(model, **overrides):
    """Re-validate a config section with the non-None overrides applied"""
    values = model.model_dump()
    values.update({k: v for k, v in overrides.items() if v is not None})
    return type(model)(**values)


@click.group()
@click.option('--config', '-c', type=click.Path(exists=True, dir_okay=False), help='Configuration file path')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.option('--log-file', help='Also write logs to this file')
@click.pass_context
def cli(ctx, config, verbose, log_file):
    """Replicated file store simulator"""
    ctx.ensure_object(dict)

    try:
        main_config = _load_config(config)
    except (ValidationError, ValueError) as e:
        raise click.UsageError(f"Invalid configuration: {e}")

    level = 'DEBUG' if verbose else main_config.logging.level
    setup_logging(level, log_file or main_config.logging.file, main_config.logging.format)

    ctx.obj['config'] = main_config


@cli.command()
@click.option('--nodes', 'node_count', type=int, help='Number of storage nodes')
@click.option('--replication', 'replication_factor', type=int, help='Replicas per file')
@click.option('--storage-root', help='Directory holding the node directories')
@click.option('--download-dir', help='Directory downloads are written to')
@click.pass_context
def shell(ctx, node_count, replication_factor, storage_root, download_dir):
    """Run the interactive command loop"""
    config: Config = ctx.obj['config']

    try:
        cluster = _override(config.cluster, node_count=node_count,
                            replication_factor=replication_factor)
        storage = _override(config.storage, storage_root=storage_root,
                            download_dir=download_dir)
    except ValidationError as e:
        raise click.UsageError(f"Invalid cluster settings: {e}")

    manager = ReplicationManager(cluster=cluster, storage=storage)
    logger.info(f"Starting shell: {manager}")
    CommandDispatcher(manager, storage).run()


@cli.command()
@click.option('--storage-root', help='Directory holding the node directories')
@click.pass_context
def status(ctx, storage_root):
    """Show replicas persisted in the node directories"""
    config: Config = ctx.obj['config']
    root = storage_root or config.storage.storage_root

    if not os.path.isdir(root):
        click.echo(f"Storage root does not exist: {root}", err=True)
        sys.exit(1)

    nodes = scan_node_directories(root, config.storage.node_dir_prefix)
    click.echo(f"Storage root: {os.path.abspath(root)}")

    click.echo(f"\nNode directories ({len(nodes)}):")
    if nodes:
        for node in nodes:
            click.echo(f"  Node {node['node_id']}: {len(node['files'])} replicas, "
                       f"{format_file_size(node['total_size'])}")
            for name in node['files']:
                click.echo(f"    - {name}")
    else:
        click.echo("  No node directories found")

    disk = get_disk_usage(root)
    click.echo(f"\nDisk: {format_file_size(disk['free'])} free of "
               f"{format_file_size(disk['total'])} ({disk['percent']:.1f}% used)")


@cli.command()
@click.option('--output', '-o', default='dfs_config.json', help='Output configuration file')
@click.pass_context
def init_config(ctx, output):
    """Initialize a configuration file with default settings"""
    config = Config(
        cluster=ClusterConfig(),
        storage=StorageConfig()
    )

    config.save_to_file(output)
    click.echo(f"Configuration file created: {output}")
    click.echo("Edit the file to customize settings, then use:")
    click.echo(f"  dfs --config {output} shell")


def main():
    """Main entry point"""
    cli()


if __name__ == '__main__':
    main()
