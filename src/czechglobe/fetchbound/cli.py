import click

from czechglobe.fetchbound import config
from czechglobe.fetchbound import fetchbound


@click.group(epilog="For detailed help on each command, run: fetchbound COMMAND --help",
             invoke_without_command=True)
@click.pass_context
def cli(ctx):
    """The fetchbound utility reconciles a tower's fetch-distance vector with
    a region-of-interest polygon: it reconstructs the boundary polygon from a
    fetch vector, and extracts per-azimuth fetch distances from a polygon."""
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())

@cli.command()
@click.option('-c', '--config', help='Path to configuration file to create or replace')
def init(config):
    """Populates a configuration file based on user input."""
    click.echo(fetchbound.banner())
    config = fetchbound.init_config(config)
    click.echo(f'Initialized the fetchbound configuration file {config}')

@cli.command()
@click.option('-c', '--config', 'config_filename', help='Path to configuration file to display', required=True)
def info(config_filename):
    """Summarizes the contents of a configuration file."""
    click.echo(fetchbound.banner())
    configuration = config.configuration(config.config_parser_factory(config_filename), {})
    configuration.show()
    valid, errors = config.validate(configuration)
    if not valid:
        click.echo()
        for error in errors:
            click.echo(f'  ! {error}')

@cli.command()
@click.option('-c', '--config', 'config_filename', help='Path to configuration file', required=True)
@click.option('-s', '--step', 'subdivision_step', type=float, help='Subdivision step in degrees within each sector.')
@click.option('-z', '--utm-zone', type=int, help='UTM zone of the tower location.')
@click.option('-o', '--output-dir', help='Directory for the reconstructed boundary.')
def reconstruct(config_filename, subdivision_step, utm_zone, output_dir):
    """Reconstructs the fetch boundary polygon from a fetch-distance vector."""
    click.echo(fetchbound.banner())
    overrides = {
        'subdivision_step': subdivision_step,
        'utm_zone': utm_zone,
        'output_dir': output_dir,
    }
    configuration = config.configuration(config.config_parser_factory(config_filename), overrides)
    fetchbound.init_logging()
    try:
        fetchbound.reconstruct(configuration)
    except Exception as e:
        print("\nUnable to reconstruct boundary: " + str(e))
        exit(1)
    click.echo(f'Reconstructed fetch boundary using the configuration file {config_filename}')

@cli.command()
@click.option('-c', '--config', 'config_filename', help='Path to configuration file', required=True)
@click.option('-a', '--azimuth-step', type=float, help='Angle between transects in degrees.')
@click.option('-d', '--probe-distance', type=float, help='Transect length in metres.')
@click.option('-o', '--output-dir', help='Directory for the fetch table and intersections.')
def extract(config_filename, azimuth_step, probe_distance, output_dir):
    """Extracts per-azimuth fetch distances from a region-of-interest polygon."""
    click.echo(fetchbound.banner())
    overrides = {
        'azimuth_step': azimuth_step,
        'probe_distance': probe_distance,
        'output_dir': output_dir,
    }
    configuration = config.configuration(config.config_parser_factory(config_filename), overrides)
    fetchbound.init_logging()
    try:
        fetchbound.extract(configuration)
    except Exception as e:
        print("\nUnable to extract fetch distances: " + str(e))
        exit(1)
    click.echo(f'Extracted fetch distances using the configuration file {config_filename}')

if __name__ == "__main__":
    cli()
