from collections import namedtuple
import enum
import math


class BitEnum(enum.IntEnum):
    """A type for enums representing bitmask field values.
    """
    @classmethod
    def unpack(cls, bitmask):
        """Unpack a bitmask into a dictionary from field name to field state.

        Parameters
        ----------
        bitmask : int
            The bitmask to unpack.

        Returns
        -------
        status : dict[str, bool]
            The mapping from field name to field status.
        """
        return {k: bool(bitmask & v) for k, v in cls.__members__.items()}


class Mod(BitEnum):
    """The mods in osu! that change the difficulty of a map.
    """
    no_fail = 1
    easy = 1 << 1
    touch_device = 1 << 2
    hidden = 1 << 3
    hard_rock = 1 << 4
    sudden_death = 1 << 5
    double_time = 1 << 6
    relax = 1 << 7
    half_time = 1 << 8
    nightcore = 1 << 9  # always used with double_time
    flashlight = 1 << 10
    spun_out = 1 << 12
    auto_pilot = 1 << 13
    perfect = 1 << 14

    @classmethod
    def parse(cls, cs):
        """Parse a mod mask out of a list of shortened mod names.

        Parameters
        ----------
        cs : str
            The mod string, for example ``'HDDT'``.

        Returns
        -------
        mod_mask : int
            The mod mask.

        Raises
        ------
        ValueError
            Raised when ``cs`` is not a sequence of known two letter mods.
        """
        if len(cs) % 2 != 0:
            raise ValueError(f'malformed mods: {cs!r}')

        cs = cs.lower()
        mapping = {
            'nf': cls.no_fail,
            'ez': cls.easy,
            'td': cls.touch_device,
            'hd': cls.hidden,
            'hr': cls.hard_rock,
            'sd': cls.sudden_death,
            'dt': cls.double_time,
            'rx': cls.relax,
            'ht': cls.half_time,
            # nightcore implies double time
            'nc': cls.nightcore | cls.double_time,
            'fl': cls.flashlight,
            'so': cls.spun_out,
            'ap': cls.auto_pilot,
            'pf': cls.perfect,
        }

        mod = 0
        for n in range(0, len(cs), 2):
            try:
                mod |= mapping[cs[n:n + 2]]
            except KeyError:
                raise ValueError(f'unknown mod: {cs[n:n + 2]!r}')

        return mod


def clock_rate(mods):
    """The speed multiplier applied to the map's clock by ``mods``.

    Parameters
    ----------
    mods : int
        The mod mask.

    Returns
    -------
    clock_rate : float
        1.5 for double time or nightcore, 0.75 for half time, otherwise 1.
    """
    if mods & (Mod.double_time | Mod.nightcore):
        return 1.5
    if mods & Mod.half_time:
        return 0.75
    return 1.0


def ar_to_ms(ar):
    """Convert an approach rate value to milliseconds of time that an element
    appears on the screen before being hit.

    Parameters
    ----------
    ar : float
        The approach rate.

    Returns
    -------
    milliseconds : float
        The number of milliseconds that an element appears on the screen before
         being hit at the given approach rate.

    See Also
    --------
    :func:`osu_stars.mod.ms_to_ar`
    """
    # NOTE: The formula for ar_to_ms is different for ar >= 5 and ar < 5
    # see: https://osu.ppy.sh/wiki/Song_Setup#Approach_Rate
    if ar >= 5:
        return 1950 - (ar * 150)
    else:
        return 1800 - (ar * 120)


def ms_to_ar(ms):
    """Convert milliseconds to hit an element into an approach rate value.

    Parameters
    ----------
    ms : float
        The number of milliseconds that an element appears on the screen before
        being hit.

    Returns
    -------
    ar : float
        The approach rate value that produces the given millisecond value.

    See Also
    --------
    :func:`osu_stars.mod.ar_to_ms`
    """
    ar = (ms - 1950) / -150
    if ar < 5:
        # the ar lines cross at 5 but we use a different formula for the slower
        # approach rates.
        return (ms - 1800) / -120
    return ar


def circle_radius(cs):
    """Compute the ``CS`` attribute into a circle radius in osu! pixels.

    Parameters
    ----------
    cs : float
        The circle size.

    Returns
    -------
    radius : float
        The radius in osu! pixels.
    """
    return (512 / 16) * (1 - 0.7 * (cs - 5) / 5)


# the 300 window at OD 0 used by the attribute builder of the 2021 calculators;
# the earliest calculation has its own bounds in `legacy_od`
GREAT_HIT_WINDOW_BASE = 80


def od_to_ms_300(od):
    """Convert an overall difficulty value into milliseconds to hit an object
    at maximum accuracy.

    Parameters
    ----------
    od : float
        The overall difficulty.

    Returns
    -------
    ms : float
        The number of milliseconds to hit an object at maximum accuracy.

    See Also
    --------
    :func:`osu_stars.mod.ms_300_to_od`
    """
    return GREAT_HIT_WINDOW_BASE - 6 * od


def ms_300_to_od(ms):
    """Convert the milliseconds to score a 300 into an OD value.

    Parameters
    ----------
    ms : float
        The length of the 300 window in milliseconds.

    Returns
    -------
    od : float
        The OD value that produces a 300 window of length ``ms``.

    See Also
    --------
    :func:`osu_stars.mod.od_to_ms_300`
    """
    return (GREAT_HIT_WINDOW_BASE - ms) / 6


class MapAttributes(namedtuple(
        'MapAttributes',
        'clock_rate ar od cs great_hit_window')):
    """The difficulty settings of a map after applying mods.

    Parameters
    ----------
    clock_rate : float
        The speed multiplier of the map's clock.
    ar : float
        The effective approach rate.
    od : float
        The effective overall difficulty.
    cs : float
        The circle size.
    great_hit_window : float
        The window to score a 300 in milliseconds of real time.
    """


def map_attributes(beatmap, mods=0):
    """Compute the mod adjusted difficulty settings for a map.

    Parameters
    ----------
    beatmap : Beatmap
        The map to read the base settings from.
    mods : int, optional
        The mod mask.

    Returns
    -------
    attributes : MapAttributes
        The adjusted settings.

    Notes
    -----
    ``double_time`` and ``half_time`` do not actually affect the in game
    AR or OD; however, because the map is sped up or slowed down, the
    effective values change.
    """
    enabled = Mod.unpack(mods)
    rate = clock_rate(mods)

    cs = beatmap.circle_size
    ar = beatmap.approach_rate
    od = beatmap.overall_difficulty
    if enabled['hard_rock']:
        cs = min(1.3 * cs, 10)
        ar = min(1.4 * ar, 10)
        od = min(1.4 * od, 10)
    elif enabled['easy']:
        cs /= 2
        ar /= 2
        od /= 2

    great_hit_window = od_to_ms_300(od) / rate

    return MapAttributes(
        clock_rate=rate,
        ar=ms_to_ar(ar_to_ms(ar) / rate),
        od=ms_300_to_od(great_hit_window),
        cs=cs,
        great_hit_window=great_hit_window,
    )


# the 300 hit window bounds in ms used by the earliest star calculation
OD_MIN = 79.5
OD_MAX = 19.5


def legacy_od(base_od, clock_rate, mods=0):
    """The overall difficulty as reported by the earliest star calculation.

    Parameters
    ----------
    base_od : float
        The map's OD without any mods.
    clock_rate : float
        The speed multiplier of the map's clock.
    mods : int, optional
        The mod mask, used only for hard rock and easy.

    Returns
    -------
    od : float
        The adjusted OD.

    Notes
    -----
    The clamp reads ``min(OD_MIN, max(OD_MAX, odms))`` with the bounds in that
    order. Downstream values depend on it, so it is kept as is.
    """
    if mods & Mod.hard_rock:
        multiplier = 1.4
    elif mods & Mod.easy:
        multiplier = 0.5
    else:
        multiplier = 1.0

    od = base_od * multiplier
    odms = OD_MIN - math.ceil(6 * od)
    odms = min(OD_MIN, max(OD_MAX, odms))
    odms /= clock_rate
    return (OD_MIN - odms) / 6
