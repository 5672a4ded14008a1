from collections import namedtuple
from datetime import timedelta
import math
import re

import numpy as np

from .curve import Curve
from .game_mode import GameMode
from .position import Position
from .utils import lazyval, no_default


def _coordinate(value):
    return int(float(value))


def _milliseconds(value):
    return timedelta(milliseconds=float(value))


def _convert(convert, kind, name, value):
    try:
        return convert(value)
    except ValueError:
        raise ValueError(f'{name} should be {kind}, got {value!r}')


class TimingPoint:
    """The beat length or slider velocity in effect from an offset onwards.

    Parameters
    ----------
    offset : timedelta
        When this ``TimingPoint`` takes effect.
    ms_per_beat : float
        The milliseconds per beat for an uninherited point. For an inherited
        point this is a negative slider velocity percentage, ``-100`` being
        1x. ``NaN`` disables slider ticks.
    parent : TimingPoint or None
        The last uninherited point before an inherited one, or ``None`` for
        an uninherited point.
    """
    def __init__(self, offset, ms_per_beat, parent=None):
        self.offset = offset
        self.ms_per_beat = ms_per_beat
        self.parent = parent

    @property
    def inherited(self):
        return self.parent is not None

    @property
    def beat_length(self):
        """The milliseconds per beat that govern this point.
        """
        if self.inherited:
            return self.parent.ms_per_beat
        return self.ms_per_beat

    @property
    def slider_velocity(self):
        """The slider velocity multiplier in the range [0.1, 10].
        """
        if not self.inherited or math.isnan(self.ms_per_beat):
            return 1.0
        if self.ms_per_beat == 0:
            return 0.1
        return float(np.clip(-100 / self.ms_per_beat, 0.1, 10))

    @property
    def generate_ticks(self):
        # old maps disable ticks by writing NaN as the beat length
        return not math.isnan(self.ms_per_beat)

    def __repr__(self):
        kind = 'inherited' if self.inherited else 'uninherited'
        return (
            f'<{type(self).__qualname__}: {kind},'
            f' {self.offset.total_seconds() * 1000:g}ms>'
        )

    @classmethod
    def parse(cls, data, parent):
        """Parse a TimingPoint from a line in the ``[TimingPoints]`` section.

        Parameters
        ----------
        data : str
            The line to parse.
        parent : TimingPoint or None
            The last uninherited timing point.

        Returns
        -------
        timing_point : TimingPoint
            The parsed timing point. Only the offset, beat length and the
            uninherited flag are read; the hit sound columns are skipped.

        Raises
        ------
        ValueError
            Raised when ``data`` does not describe a ``TimingPoint``.
        """
        fields = data.split(',')
        if len(fields) < 2:
            raise ValueError(
                f'failed to parse {cls.__qualname__} from {data!r}',
            )

        offset = _convert(_milliseconds, 'a float', 'offset', fields[0])
        ms_per_beat = _convert(float, 'a float', 'ms_per_beat', fields[1])

        # the flag is missing from maps older than format version 6
        raw = fields[6] if len(fields) > 6 else '1'
        uninherited = _convert(int, 'an int', 'uninherited', raw)

        return cls(
            offset,
            ms_per_beat,
            parent=None if uninherited else parent,
        )


class SliderTiming(namedtuple(
        'SliderTiming',
        'beat_length slider_velocity generate_ticks')):
    """The timing values that shape a slider.

    Parameters
    ----------
    beat_length : float
        The milliseconds per beat of the governing uninherited point.
    slider_velocity : float
        The velocity multiplier of the governing inherited point.
    generate_ticks : bool
        Whether ticks are placed along the slider.
    """


# used when a map has no timing points at all
default_slider_timing = SliderTiming(
    beat_length=1000.0,
    slider_velocity=1.0,
    generate_ticks=True,
)


class HitObject:
    """An object in the ``[HitObjects]`` section.

    Parameters
    ----------
    position : Position
        Where this object appears on the screen.
    time : timedelta
        When this object appears in the map.

    Notes
    -----
    Hit sounds do not change the difficulty, so they are not kept.
    """
    def __init__(self, position, time):
        self.position = position
        self.time = time

    def __repr__(self):
        return (
            f'<{type(self).__qualname__}: {self.position},'
            f' {self.time.total_seconds() * 1000:g}ms>'
        )

    @classmethod
    def parse(cls, data):
        """Parse a HitObject from a line in a ``.osu`` file.

        Parameters
        ----------
        data : str
            The line to parse.

        Returns
        -------
        hit_object : HitObject
            The parsed hit object. This will be the concrete subclass given
            the type bits.

        Raises
        ------
        ValueError
            Raised when ``data`` does not describe a ``HitObject``.
        """
        fields = data.split(',')
        if len(fields) < 5:
            raise ValueError(f'not enough elements in line, got {data!r}')

        # the fifth column is the hit sound
        x, y, time, type_ = fields[:4]
        rest = fields[5:]

        position = Position(
            _convert(_coordinate, 'an int', 'x', x),
            _convert(_coordinate, 'an int', 'y', y),
        )
        time = _convert(_milliseconds, 'a number', 'time', time)
        type_ = _convert(int, 'an int', 'type', type_)

        for subcls in (Circle, Slider, Spinner, HoldNote):
            if type_ & subcls.type_code:
                return subcls._parse(position, time, rest)

        raise ValueError(f'unknown type code {type_!r}')

    @classmethod
    def _parse(cls, position, time, rest):
        return cls(position, time)


class Circle(HitObject):
    type_code = 1


class HoldNote(HitObject):
    """A held key in osu!mania. It is rated like a spinner.
    """
    type_code = 128


class Spinner(HitObject):
    """A spinner.

    Parameters
    ----------
    position : Position
        Where this spinner appears on the screen.
    time : timedelta
        When this spinner starts.
    end_time : timedelta
        When this spinner ends.
    """
    type_code = 8

    def __init__(self, position, time, end_time):
        super().__init__(position, time)
        self.end_time = end_time

    @classmethod
    def _parse(cls, position, time, rest):
        if not rest:
            raise ValueError('missing end_time')

        end_time = _convert(_milliseconds, 'a number', 'end_time', rest[0])
        return cls(position, time, end_time)


class Slider(HitObject):
    """A slider.

    Parameters
    ----------
    position : Position
        Where this slider appears on the screen.
    time : datetime.timedelta
        When this slider appears in the map.
    curve_type : str
        The curve letter: ``'L'``, ``'P'``, ``'B'`` or ``'C'``.
    points : list[Position]
        The control points of the curve, starting with ``position``.
    repeat : int
        The number of times the slider is traversed, so one more than the
        number of repeat arrows.
    length : float
        The length of this slider in osu! pixels.
    """
    type_code = 2

    def __init__(self, position, time, curve_type, points, repeat, length):
        super().__init__(position, time)
        self.curve_type = curve_type
        self.points = points
        self.repeat = repeat
        self.length = length

    @lazyval
    def curve(self):
        """The slider's curve, built with its own buffers.
        """
        return Curve.from_kind_and_points(
            self.curve_type,
            self.points,
            self.length,
        )

    @classmethod
    def _parse(cls, position, time, rest):
        # edge sounds and samples may follow the length
        if len(rest) < 3:
            raise ValueError(f'missing required slider data in {rest!r}')

        path, repeat, length = rest[:3]

        curve_type, *raw_points = path.split('|')
        if curve_type not in Curve.known_kinds():
            raise ValueError(f'unknown curve type: {curve_type!r}')

        points = [position]
        for point in raw_points:
            x, sep, y = point.partition(':')
            if not sep:
                raise ValueError(
                    f'expected points in the form x:y, got {point!r}',
                )
            points.append(Position(
                _convert(_coordinate, 'an int', 'x', x),
                _convert(_coordinate, 'an int', 'y', y),
            ))

        return cls(
            position,
            time,
            curve_type,
            points,
            _convert(int, 'an int', 'repeat', repeat),
            _convert(float, 'a float', 'pixel_length', length),
        )


def _get_as_str(groups, section, field, default=no_default):
    """Lookup a field from a given section.

    Parameters
    ----------
    groups : dict[str, dict[str, str]]
        The grouped osu! file.
    section : str
        The section to read from.
    field : str
        The field to read.
    default : any, optional
        A value to return if ``field`` is not in ``groups[section]``.

    Returns
    -------
    cs : str
        ``groups[section][field]`` or default if ``field` is not in
         ``groups[section]``.
    """
    try:
        mapping = groups[section]
    except KeyError:
        if default is no_default:
            raise ValueError(f'missing section {section!r}')
        return default

    try:
        return mapping[field]
    except KeyError:
        if default is no_default:
            raise ValueError(f'missing field {field!r} in section {section!r}')
        return default


def _get_as(convert, kind, groups, section, field, default=no_default):
    v = _get_as_str(groups, section, field, default)

    if v is default:
        return v

    try:
        return convert(v)
    except ValueError:
        raise ValueError(
            f'field {field!r} in section {section!r} should be {kind},'
            f' got {v!r}',
        )


def _get_as_int(groups, section, field, default=no_default):
    return _get_as(int, 'an int', groups, section, field, default)


def _get_as_float(groups, section, field, default=no_default):
    return _get_as(float, 'a float', groups, section, field, default)


class Beatmap:
    """A beatmap for osu! standard.

    Parameters
    ----------
    format_version : int
        The version of the beatmap file.
    mode : GameMode
        The game mode.
    title : str
        The title of the song limited to ascii characters.
    artist : str
        The name of the song artist limited to ascii characters.
    creator : str
        The username of the mapper.
    version : str
        The name of the beatmap's difficulty.
    beatmap_id : int or None
        The id of this single beatmap. Old beatmaps did not store this in the
        file.
    hp_drain_rate : float
        The ``HP`` attribute of the beatmap.
    circle_size, : float
        The ``CS`` attribute of the beatmap.
    overall_difficulty : float
        The ``OD`` attribute of the beatmap.
    approach_rate : float
        The ``AR`` attribute of the beatmap.
    slider_multiplier : float
        The multiplier for slider velocity.
    slider_tick_rate : float
        How often slider ticks appear.
    timing_points : list[TimingPoint]
        The timing points the the map.
    hit_objects : list[HitObject]
        The hit objects in the map.

    Notes
    -----
    Only the sections needed to rate the map are read.
    """
    _version_regex = re.compile(r'^osu file format v(\d+)$')

    def __init__(self,
                 *,
                 format_version,
                 mode,
                 title,
                 artist,
                 creator,
                 version,
                 beatmap_id,
                 hp_drain_rate,
                 circle_size,
                 overall_difficulty,
                 approach_rate,
                 slider_multiplier,
                 slider_tick_rate,
                 timing_points,
                 hit_objects):
        self.format_version = format_version
        self.mode = mode
        self.title = title
        self.artist = artist
        self.creator = creator
        self.version = version
        self.beatmap_id = beatmap_id
        self.hp_drain_rate = hp_drain_rate
        self.circle_size = circle_size
        self.overall_difficulty = overall_difficulty
        self.approach_rate = approach_rate
        self.slider_multiplier = slider_multiplier
        self.slider_tick_rate = slider_tick_rate
        self.timing_points = timing_points
        self._hit_objects = hit_objects

    @property
    def display_name(self):
        """The name of the map as it appears in game.
        """
        return f'{self.artist} - {self.title} [{self.version}]'

    def hit_objects(self, *, circles=True, sliders=True, spinners=True):
        """Retrieve hit_objects.

        Parameters
        ----------
        circles : bool, optional
            If circles should be included.
        sliders : bool, optional
            If sliders should be included.
        spinners : bool, optional
            If spinners and hold notes should be included.

        Returns
        -------
        hit_objects : tuple[HitObject]
            The objects in map order.
        """
        keep_classes = []
        if spinners:
            keep_classes.extend((Spinner, HoldNote))
        if circles:
            keep_classes.append(Circle)
        if sliders:
            keep_classes.append(Slider)

        return tuple(ob for ob in self._hit_objects if
                     isinstance(ob, tuple(keep_classes)))

    def timing_point_at(self, time):
        """Get the :class:`osu_stars.beatmap.TimingPoint` at the given time.

        Parameters
        ----------
        time : datetime.timedelta
            The time to lookup the :class:`osu_stars.beatmap.TimingPoint` for.

        Returns
        -------
        timing_point : TimingPoint or None
            The last timing point at or before ``time``, the first timing
            point if ``time`` is before all of them, or None if the map has no
            timing points.
        """
        for tp in reversed(self.timing_points):
            if tp.offset <= time:
                return tp

        if not self.timing_points:
            return None
        return self.timing_points[0]

    def slider_timing_at(self, time):
        """Get the timing values for a slider starting at ``time``.

        Parameters
        ----------
        time : datetime.timedelta
            The start time of the slider.

        Returns
        -------
        timing : SliderTiming
            The beat length, velocity multiplier and tick flag.
        """
        tp = self.timing_point_at(time)
        if tp is None:
            return default_slider_timing

        return SliderTiming(
            beat_length=tp.beat_length,
            slider_velocity=tp.slider_velocity,
            generate_ticks=tp.generate_ticks,
        )

    def __repr__(self):
        return f'<{type(self).__qualname__}: {self.display_name}>'

    @classmethod
    def from_path(cls, path):
        """Read in a ``Beatmap`` object from a file on disk.

        Parameters
        ----------
        path : str or pathlib.Path
            The path to the file to read from.

        Returns
        -------
        beatmap : Beatmap
            The parsed beatmap object.

        Raises
        ------
        ValueError
            Raised when the file cannot be parsed as a ``.osu`` file.
        """
        with open(path, encoding='utf-8-sig') as file:
            return cls.from_file(file)

    @classmethod
    def from_file(cls, file):
        """Read in a ``Beatmap`` object from an open file object.

        Parameters
        ----------
        file : file-like
            The file object to read from.

        Returns
        -------
        beatmap : Beatmap
            The parsed beatmap object.

        Raises
        ------
        ValueError
            Raised when the file cannot be parsed as a ``.osu`` file.
        """
        return cls.parse(file.read())

    _mapping_groups = frozenset({
        'General',
        'Metadata',
        'Difficulty',
    })

    @classmethod
    def _find_groups(cls, lines):
        """Split the input data into the named groups.

        Parameters
        ----------
        lines : iterator[str]
            The raw lines from the file.

        Returns
        -------
        groups : dict[str, list[str] or dict[str, str]]
            The lines in the section. If the section is a mapping section
            the the value will be a dict from key to value.
        """
        groups = {}

        current_group = None
        group_buffer = []

        def commit_group():
            nonlocal group_buffer

            if current_group is None:
                return

            if current_group in cls._mapping_groups:
                # build a dict from the ``Key: Value`` line format.
                mapping = {}
                for line in group_buffer:
                    key, _, value = line.partition(':')
                    mapping[key.strip()] = value.strip()
                group_buffer = mapping

            groups[current_group] = group_buffer
            group_buffer = []

        for line in lines:
            # some (presmuably manually edited) beatmaps have whitespace at the
            # beginning or end of lines.
            line = line.strip()
            if not line or line.startswith('//'):
                continue

            if line[0] == '[' and line[-1] == ']':
                commit_group()
                current_group = line[1:-1]
            else:
                group_buffer.append(line)

        commit_group()
        return groups

    @classmethod
    def parse(cls, data):
        """Parse a ``Beatmap`` from text in the ``.osu`` format.

        Parameters
        ----------
        data : str
            The data to parse.

        Returns
        -------
        beatmap : Beatmap
            The parsed beatmap object.

        Raises
        ------
        ValueError
            Raised when the data cannot be parsed in the ``.osu`` format.
        """
        data = data.lstrip()
        lines = iter(data.splitlines())
        line = next(lines, '')
        match = cls._version_regex.match(line.strip())
        if match is None:
            raise ValueError(f'missing osu file format specifier in: {line!r}')

        format_version = int(match.group(1))
        groups = cls._find_groups(lines)

        od = _get_as_float(groups, 'Difficulty', 'OverallDifficulty')

        timing_points = []
        # the parent starts as None because the first timing point should
        # not be inherited
        parent = None
        for raw_timing_point in groups.get('TimingPoints', []):
            timing_point = TimingPoint.parse(raw_timing_point, parent)
            if timing_point.parent is None:
                parent = timing_point
            timing_points.append(timing_point)

        return cls(
            format_version=format_version,
            mode=GameMode(_get_as_int(groups, 'General', 'Mode', 0)),
            title=_get_as_str(groups, 'Metadata', 'Title', ''),
            artist=_get_as_str(groups, 'Metadata', 'Artist', ''),
            creator=_get_as_str(groups, 'Metadata', 'Creator', ''),
            version=_get_as_str(groups, 'Metadata', 'Version', ''),
            beatmap_id=_get_as_int(groups, 'Metadata', 'BeatmapID', None),
            hp_drain_rate=_get_as_float(groups, 'Difficulty', 'HPDrainRate'),
            circle_size=_get_as_float(groups, 'Difficulty', 'CircleSize'),
            overall_difficulty=od,
            approach_rate=_get_as_float(
                groups,
                'Difficulty',
                'ApproachRate',
                # old maps didn't have an AR so the OD is used as a default
                default=od,
            ),
            slider_multiplier=_get_as_float(
                groups,
                'Difficulty',
                'SliderMultiplier',
                default=1.4,  # taken from wiki
            ),
            slider_tick_rate=_get_as_float(
                groups,
                'Difficulty',
                'SliderTickRate',
                default=1.0,  # taken from wiki
            ),
            timing_points=timing_points,
            hit_objects=[
                HitObject.parse(raw_hit_object)
                for raw_hit_object in groups.get('HitObjects', [])
            ],
        )
