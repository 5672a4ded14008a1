from enum import IntEnum, unique


@unique
class GameMode(IntEnum):
    """The game modes a beatmap can be written for.

    Only :attr:`standard` maps can be rated.
    """
    standard = 0
    taiko = 1
    ctb = 2
    mania = 3

    @property
    def display_name(self):
        """The name of the mode as it appears in game.
        """
        return _display_names[self]


_display_names = {
    GameMode.standard: 'osu!',
    GameMode.taiko: 'osu!taiko',
    GameMode.ctb: 'osu!catch',
    GameMode.mania: 'osu!mania',
}
