import requests

from .beatmap import Beatmap


DEFAULT_DOWNLOAD_URL = 'https://osu.ppy.sh/osu'


def download_beatmap(beatmap_id, *, download_url=DEFAULT_DOWNLOAD_URL):
    """Download a beatmap.

    Parameters
    ----------
    beatmap_id : int or str
        The id of the beatmap to download.
    download_url : str, optional
        The url to download ``.osu`` files from. The beatmap id is appended
        as the last path segment.

    Returns
    -------
    beatmap : Beatmap
        The downloaded beatmap.

    Raises
    ------
    requests.HTTPError
        Raised when the server responds with an error status.
    ValueError
        Raised when the response is not a ``.osu`` file.
    """
    beatmap_response = requests.get(f'{download_url}/{beatmap_id}')
    beatmap_response.raise_for_status()

    data = beatmap_response.content
    return Beatmap.parse(data.decode('utf-8-sig'))
