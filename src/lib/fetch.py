"""
Resource reads for the resolution pipeline

Local files are read directly (OSError propagates unchanged); http(s)
URLs are fetched with requests. Data files (templates, the dzslides asset)
are looked up in the user data directory first, then in the package's
built-in data directory.
"""

from pathlib import Path
from typing import Optional, Union
from urllib.parse import urlparse

import requests

from ..config import appsettings
from .errors import FetchError
from .log import LOG


# Built-in data shipped with the package
DATA_DIR = Path(__file__).resolve().parent.parent / "data"


def url_is(source: str) -> bool:
    """Check whether a source string is an http(s) URL"""
    return urlparse(source).scheme in ("http", "https")


def item_fetch(source: str, timeout: Optional[float] = None) -> bytes:
    """
    Fetch a resource from a local path or URL.

    Args:
        source: File path or http(s) URL
        timeout: Seconds to wait for a URL (defaults to appsettings.fetch_timeout)

    Returns:
        Raw bytes of the resource

    Raises:
        FetchError: The URL could not be retrieved
        OSError: The local file could not be read
    """
    if url_is(source):
        LOG(f"Fetching {source}", level=2)
        try:
            response = requests.get(
                source, timeout=timeout if timeout is not None else appsettings.fetch_timeout
            )
            response.raise_for_status()
        except requests.RequestException as e:
            raise FetchError(f"Could not fetch {source}: {e}") from e
        return response.content

    LOG(f"Reading {source}", level=3)
    return Path(source).read_bytes()


def text_fetch(source: str, timeout: Optional[float] = None) -> str:
    """Fetch a resource and decode it as UTF-8 (a leading BOM is dropped)"""
    return item_fetch(source, timeout).decode("utf-8-sig")


def dataFile_path(name: Union[str, Path], data_dir: Optional[Path] = None) -> Path:
    """
    Locate a data file.

    Args:
        name: Path relative to a data directory (e.g. "templates/default.html5")
        data_dir: User data directory searched before the built-in data

    Returns:
        Path of the first existing candidate, or the built-in path when none
        exists (reading it then raises FileNotFoundError)
    """
    if data_dir is not None:
        candidate = Path(data_dir) / name
        if candidate.exists():
            return candidate
    return DATA_DIR / name


def dataFile_read(name: Union[str, Path], data_dir: Optional[Path] = None) -> str:
    """Read a data file as UTF-8 text"""
    path = dataFile_path(name, data_dir)
    LOG(f"Reading data file {path}", level=3)
    return path.read_text(encoding="utf-8")
