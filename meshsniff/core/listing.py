from typing import Iterable, List
from urllib.parse import urlsplit

from meshsniff.core.models import FileRecord, ModelFormat


def display_name(url: str) -> str:
    """Last path segment without query string, e.g. 'chair.glb'."""
    path = urlsplit(url).path if "://" in url else url.split("?")[0]
    name = path.rstrip("/").split("/")[-1] if path else ""
    return name or "Unknown File"


def origin_host(origin: str) -> str:
    host = urlsplit(origin).hostname if origin and "://" in origin else None
    return host or "Unknown"


def badge(file_format: ModelFormat) -> str:
    return file_format.value.replace(".", "").upper()


def newest_first(records: Iterable[FileRecord]) -> List[FileRecord]:
    return sorted(records, key=lambda record: record.discovered_at, reverse=True)


def filter_by_name(records: Iterable[FileRecord], query: str) -> List[FileRecord]:
    query = (query or "").lower()
    return [record for record in records if query in display_name(record.url).lower()]
