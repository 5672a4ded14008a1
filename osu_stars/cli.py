from functools import partial
import logging

import click

from .beatmap import Beatmap
from .client import DEFAULT_DOWNLOAD_URL, download_beatmap
from .game_mode import GameMode
from .mod import Mod
from .rules import LATEST, rule_versions
from .stars import stars as compute_stars


def _parse_mods(ctx, param, value):
    try:
        return Mod.parse(value)
    except ValueError as e:
        raise click.BadParameter(str(e))


def _handle_failure(action, name, e, skip_exceptions):
    """Log the exception when skipping, otherwise abort with a hint.
    """
    if skip_exceptions:
        logging.exception(f'Failed to {action} "{name}"')
        return
    raise click.ClickException(
        f'Failed to {action} "{name}": {e}. '
        'Use --skip-exceptions to skip this map and continue.'
    ) from e


def _load_beatmaps(paths, beatmap_ids, download_url, skip_exceptions):
    """Yield ``(source, beatmap)`` pairs for every requested map.
    """
    sources = [(path, partial(Beatmap.from_path, path)) for path in paths]
    sources.extend(
        (
            f'beatmap {beatmap_id}',
            partial(download_beatmap, beatmap_id, download_url=download_url),
        )
        for beatmap_id in beatmap_ids
    )

    for name, load in sources:
        try:
            beatmap = load()
        except Exception as e:
            _handle_failure('load', name, e, skip_exceptions)
            continue

        if beatmap.mode != GameMode.standard:
            raise click.BadParameter(
                f'"{name}" is an {beatmap.mode.display_name} map, only'
                f' {GameMode.standard.display_name} maps can be rated',
                param_hint='PATHS',
            )

        yield name, beatmap


@click.group()
def main():
    """osu! star rating utilities.
    """


@main.command()
@click.argument(
    'paths',
    nargs=-1,
    type=click.Path(exists=True, dir_okay=False),
)
@click.option(
    '--beatmap-id',
    'beatmap_ids',
    type=int,
    multiple=True,
    help='Download and rate the beatmap with this id.',
)
@click.option(
    '--download-url',
    default=DEFAULT_DOWNLOAD_URL,
    show_default=True,
    help='Where to download beatmaps from.',
)
@click.option(
    '--mods',
    default='',
    callback=_parse_mods,
    help='The mods to rate with, for example HDDT.',
)
@click.option(
    '--passed-objects',
    type=click.IntRange(min=0),
    default=None,
    help='Only rate this many objects from the start of each map.',
)
@click.option(
    '--rules',
    type=click.Choice(list(rule_versions)),
    default=LATEST.name,
    show_default=True,
    help='The version of the star rating formulas to use.',
)
@click.option(
    '--skip-exceptions/--no-skip-exceptions',
    help='Skip beatmaps that cause exceptions rather than exiting?',
    default=False,
)
@click.option(
    '--verbose',
    is_flag=True,
    help='Log how each map was rated.',
)
def stars(paths,
          beatmap_ids,
          download_url,
          mods,
          passed_objects,
          rules,
          skip_exceptions,
          verbose):
    """Print the star rating of beatmaps.
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG)

    beatmaps = _load_beatmaps(
        paths,
        beatmap_ids,
        download_url,
        skip_exceptions,
    )
    for name, beatmap in beatmaps:
        try:
            attributes = compute_stars(
                beatmap,
                mods=mods,
                passed_objects=passed_objects,
                rules=rules,
            )
        except Exception as e:
            _handle_failure('rate', name, e, skip_exceptions)
            continue

        click.echo(
            f'{beatmap.display_name}: {attributes.stars:.2f} stars'
            f' (aim {attributes.aim_strain:.2f},'
            f' speed {attributes.speed_strain:.2f},'
            f' max combo {attributes.max_combo})'
        )
