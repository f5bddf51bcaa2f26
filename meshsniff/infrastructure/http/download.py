from pathlib import Path

import requests

from meshsniff.core.listing import display_name
from meshsniff.i18n.strings import Strings
from meshsniff.utils.logger import logger

DOWNLOAD_CHUNK_SIZE = 64 * 1024


def resolve_collision(dest: Path) -> Path:
    """
    Renames file if destination exists.
    chair.glb -> chair_v1.glb, chair_v2.glb...
    """
    if not dest.exists():
        return dest

    counter = 1
    while True:
        new_name = f"{dest.stem}_v{counter}{dest.suffix}"
        new_dest = dest.parent / new_name
        if not new_dest.exists():
            return new_dest
        counter += 1


def save_file(url: str, directory: Path, session: requests.Session = None, timeout: float = 30.0) -> Path:
    """
    Streams a catalogued resource into `directory`. The body is written to a
    .part file first and renamed once complete. Raises requests.RequestException
    on network errors and non-success status codes.
    """
    session = session or requests.Session()
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)

    final_path = resolve_collision(directory / display_name(url))
    part_path = final_path.with_name(final_path.name + ".part")

    with session.get(url, stream=True, timeout=timeout) as response:
        response.raise_for_status()
        try:
            with open(part_path, "wb") as f:
                for chunk in response.iter_content(chunk_size=DOWNLOAD_CHUNK_SIZE):
                    if chunk:
                        f.write(chunk)
        except BaseException:
            part_path.unlink(missing_ok=True)
            raise

    part_path.replace(final_path)
    logger.info(Strings.SAVED_FILE.value.format(url, final_path))
    return final_path
