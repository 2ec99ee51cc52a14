"""
LST Air Temperature CLI Interface

Command-line interface for calibrating MODIS land surface temperature to
air temperature against ERA5 reanalysis.
"""

import sys
from datetime import datetime
from pathlib import Path

import click

from lst_airtemp.config.settings import LOGGING, RunConfig, load_config_values
from lst_airtemp.core.constants import ERA5_VARIABLES, LST_OVERPASSES
from lst_airtemp.utils.exceptions import AirTempError
from lst_airtemp.utils.logger import Logger


# ============================================================================
# Utility Functions
# ============================================================================

def validate_date(ctx, param, value):
    """Validate date format YYYY-MM-DD."""
    if value is None:
        return None
    try:
        return datetime.strptime(value, '%Y-%m-%d').date()
    except ValueError:
        raise click.BadParameter(
            f'Invalid date format: {value}. Use YYYY-MM-DD format.',
            ctx=ctx,
            param=param
        )


def resolve_config(ctx, overrides: dict) -> RunConfig:
    """Config file values overridden by the command-line options that were given."""
    config_path = ctx.obj.get('config_path')
    try:
        base = load_config_values(config_path) if config_path else {}
        base.update({k: v for k, v in overrides.items() if v is not None})
        return RunConfig.from_dict(base).validate()
    except AirTempError as e:
        raise click.ClickException(str(e))


# ============================================================================
# Main Command Group
# ============================================================================

@click.group()
@click.option('--verbose', '-v', is_flag=True, default=False, help='Enable verbose logging')
@click.option('--log-file', type=click.Path(path_type=Path), help='Custom log file path')
@click.option('--config', type=click.Path(exists=True, path_type=Path), help='Configuration file path (YAML or JSON)')
@click.version_option(version='1.0.0', prog_name='LST Air Temperature')
@click.pass_context
def cli(ctx, verbose, log_file, config):
    """
    LST Air Temperature - air temperature maps from MODIS LST and ERA5.

    \b
    Common commands:
      airtemp run       Calibrate, aggregate, report and export one window
      airtemp inspect   List available and unmatched dates
    """
    ctx.ensure_object(dict)

    if log_file is None and LOGGING['file_log']:
        log_file = LOGGING['log_file']

    Logger.setup(
        level='DEBUG' if verbose else LOGGING['level'],
        log_file=str(log_file) if log_file else None,
    )

    ctx.obj['config_path'] = config
    ctx.obj['verbose'] = verbose


# ============================================================================
# Run Command
# ============================================================================

@cli.command()
@click.option('--region', 'region_name', type=str, help='Region name in the boundary dataset (default: Pantanal)')
@click.option('--boundary', 'boundary_path', type=click.Path(path_type=Path), help='Vector boundary dataset')
@click.option('--boundary-field', type=str, help='Attribute holding the region name (default: Bioma)')
@click.option('--lst-dir', type=click.Path(path_type=Path), help='Directory of MOD11A1 GeoTIFFs')
@click.option('--reanalysis-dir', type=click.Path(path_type=Path), help='Directory of ERA5 GeoTIFFs')
@click.option('--output-dir', '-o', type=click.Path(path_type=Path), help='Output directory')
@click.option('--start-date', '-s', type=str, callback=validate_date, help='First day (YYYY-MM-DD)')
@click.option('--end-date', '-e', type=str, callback=validate_date, help='Day after the last day (YYYY-MM-DD)')
@click.option('--alpha', type=float, help='Blend weight toward the reanalysis value (default: 0.6)')
@click.option('--scale', 'export_scale', type=float, help='Reduction and export scale in metres (default: 1000)')
@click.option('--crs', 'export_crs', type=str, help='Export CRS (default: EPSG:4326)')
@click.option('--max-pixels', type=float, help='Pixel budget of reductions and exports (default: 1e13)')
@click.option('--export-folder', type=str, help='Export folder under the output directory')
@click.option('--period-label', type=str, help='Period label used in export names (default: derived)')
@click.option('--plots/--no-plots', 'make_plots', default=None, help='Render maps and charts')
@click.option('--dry-run', is_flag=True, default=False, help='Show the resolved run without processing')
@click.pass_context
def run(ctx, dry_run, **options):
    """
    Calibrate LST to air temperature and produce maps, charts and exports.

    \b
    Examples:
      \b
      airtemp run --boundary biomas.gpkg --lst-dir data/modis --reanalysis-dir data/era5
      airtemp --config run.yaml run --alpha 0.5 --dry-run
    """
    cfg = resolve_config(ctx, options)

    if dry_run:
        click.echo('Dry run - resolved configuration:')
        for key, value in cfg.to_dict().items():
            click.echo(f'  {key}: {value}')
        click.echo('\nExports:')
        for kind in ('mean', 'max', 'min'):
            click.echo(f'  - {cfg.output_dir / cfg.export_folder / cfg.export_name(kind)}.tif')
        return

    from lst_airtemp.pipeline import AirTempPipeline

    pipeline = AirTempPipeline(cfg)
    try:
        results = pipeline.run()
    except AirTempError as e:
        click.echo(f'[FAIL] {e}', err=True)
        click.echo(f'Run summary: {pipeline.summary_path}', err=True)
        sys.exit(1)

    click.echo(f'\n[OK] Completed {cfg.region_name} {cfg.period_label}')
    for name, stat in results['statistics'].items():
        click.echo(f'  {name}: mean={stat.mean:.2f} std={stat.std_dev:.2f} '
                   f'min={stat.min:.2f} max={stat.max:.2f}')
    for kind, path in results['exports'].items():
        click.echo(f'  {kind}: {path}')
    click.echo(f'Run summary: {results["summary_path"]}')


# ============================================================================
# Inspect Command
# ============================================================================

@cli.command()
@click.option('--lst-dir', type=click.Path(exists=True, path_type=Path), help='Directory of MOD11A1 GeoTIFFs')
@click.option('--reanalysis-dir', type=click.Path(exists=True, path_type=Path), help='Directory of ERA5 GeoTIFFs')
@click.option('--start-date', '-s', type=str, callback=validate_date, help='First day (YYYY-MM-DD)')
@click.option('--end-date', '-e', type=str, callback=validate_date, help='Day after the last day (YYYY-MM-DD)')
@click.pass_context
def inspect(ctx, lst_dir, reanalysis_dir, start_date, end_date):
    """
    List LST and reanalysis dates and the LST dates without a reanalysis match.
    """
    from lst_airtemp.io import ModisLSTReader, ReanalysisLoader

    cfg = resolve_config(ctx, {
        'lst_dir': lst_dir,
        'reanalysis_dir': reanalysis_dir,
        'start_date': start_date,
        'end_date': end_date,
    })

    def in_window(dates):
        return sorted(d.date() for d in dates if cfg.start_date <= d.date() < cfg.end_date)

    try:
        lst_reader = ModisLSTReader(cfg.lst_dir)
        era5_reader = ReanalysisLoader(cfg.reanalysis_dir)
    except AirTempError as e:
        raise click.ClickException(str(e))

    click.echo(f'Window: {cfg.start_date} to {cfg.end_date} (exclusive)')

    lst_dates = set()
    for overpass, (lst_band, qc_band) in LST_OVERPASSES.items():
        for band in (lst_band, qc_band):
            found = in_window(lst_reader.available_dates(band))
            click.echo(f'  {band}: {len(found)} date(s)')
            if band == lst_band:
                lst_dates.update(found)

    unmatched_total = 0
    for kind, variable in ERA5_VARIABLES.items():
        found = set(in_window(era5_reader.available_dates(variable)))
        unmatched = sorted(lst_dates - found)
        unmatched_total += len(unmatched)
        click.echo(f'  {variable}: {len(found)} date(s), {len(unmatched)} LST date(s) unmatched')
        for day in unmatched:
            click.echo(f'    - {day}')

    if unmatched_total:
        click.echo('\nCalibration would fail: some LST dates have no reanalysis raster.')
    else:
        click.echo('\nEvery LST date has a reanalysis match.')


if __name__ == '__main__':
    cli()
