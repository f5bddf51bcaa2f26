from dataclasses import dataclass, field, asdict
from datetime import datetime
from enum import Enum
from typing import Callable, Dict, List, Optional

UNKNOWN_ORIGIN = "Unknown Origin"
UNKNOWN_SIZE = "Unknown"
SIZE_UNITS = ["B", "KB", "MB", "GB", "TB"]


class MalformedDescriptorError(ValueError):
    """Raised when an inbound response descriptor cannot be used."""


class ModelFormat(str, Enum):
    GLB = ".glb"
    GLTF = ".gltf"
    STL = ".stl"
    OBJ = ".obj"
    FBX = ".fbx"
    PLY = ".ply"
    USDZ = ".usdz"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: str) -> "ModelFormat":
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN


def format_bytes(size_bytes: Optional[int]) -> str:
    """
    Human readable size using base-1024 units, truncated (not rounded)
    to one decimal place. 2048 -> "2 KB", 1587 -> "1.5 KB".
    """
    if size_bytes is None or size_bytes < 0:
        return UNKNOWN_SIZE
    if size_bytes == 0:
        return "0 B"

    index = 0
    while index < len(SIZE_UNITS) - 1 and size_bytes >= 1024 ** (index + 1):
        index += 1

    tenths = (size_bytes * 10) // (1024 ** index)
    whole, fraction = divmod(tenths, 10)
    if fraction:
        return f"{whole}.{fraction} {SIZE_UNITS[index]}"
    return f"{whole} {SIZE_UNITS[index]}"


@dataclass(frozen=True)
class FileRecord:
    """One discovered 3D resource. Identity is the URL."""
    url: str
    format: ModelFormat
    origin: str = UNKNOWN_ORIGIN
    size_bytes: Optional[int] = None
    size_formatted: str = UNKNOWN_SIZE
    discovered_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict:
        return {
            "url": self.url,
            "format": self.format.value,
            "origin": self.origin,
            "size_bytes": self.size_bytes,
            "size_formatted": self.size_formatted,
            "discovered_at": self.discovered_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "FileRecord":
        size_bytes = data.get("size_bytes")
        return cls(
            url=data["url"],
            format=ModelFormat.parse(data.get("format", "unknown")),
            origin=data.get("origin") or UNKNOWN_ORIGIN,
            size_bytes=int(size_bytes) if size_bytes is not None else None,
            size_formatted=data.get("size_formatted") or format_bytes(size_bytes),
            discovered_at=datetime.fromisoformat(data["discovered_at"]),
        )


PrefixFetch = Callable[[int], bytes]


def _header_lookup(headers: List[Dict], name: str) -> Optional[str]:
    for header in headers or []:
        if str(header.get("name", "")).lower() == name:
            return header.get("value")
    return None


def _parse_length(value) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        length = int(value)
    except (TypeError, ValueError):
        return None
    return length if length >= 0 else None


@dataclass
class ResponseDescriptor:
    """
    An intercepted HTTP response as handed over by the interception layer.

    `fetch_prefix`, when given, is called with a byte cap and must return at
    most that many leading bytes of the body. When absent the pipeline falls
    back to its own ranged fetcher.
    """
    url: str
    origin: Optional[str] = None
    content_length: Optional[int] = None
    content_type: Optional[str] = None
    resource_type: Optional[str] = None
    fetch_prefix: Optional[PrefixFetch] = None

    @classmethod
    def from_dict(cls, data: dict) -> "ResponseDescriptor":
        """
        Accepts both the flat form ({url, origin, content_length, content_type})
        and the raw interceptor form ({url, initiator, type, responseHeaders}).
        """
        if not isinstance(data, dict):
            raise MalformedDescriptorError(f"descriptor must be an object, got {type(data).__name__}")

        url = data.get("url")
        if not isinstance(url, str) or not url.strip():
            raise MalformedDescriptorError("descriptor has no url")

        headers = data.get("responseHeaders") or []
        content_length = data.get("content_length", data.get("contentLengthBytes"))
        if content_length is None:
            content_length = _header_lookup(headers, "content-length")
        content_type = data.get("content_type", data.get("contentType"))
        if content_type is None:
            content_type = _header_lookup(headers, "content-type")

        return cls(
            url=url,
            origin=data.get("origin") or data.get("initiator"),
            content_length=_parse_length(content_length),
            content_type=content_type.lower() if isinstance(content_type, str) else None,
            resource_type=data.get("resource_type") or data.get("type"),
        )

    def to_event(self) -> dict:
        return {
            "url": self.url,
            "origin": self.origin,
            "content_length": self.content_length,
            "content_type": self.content_type,
            "resource_type": self.resource_type,
        }


def discovery_payload(record: FileRecord) -> dict:
    """Payload carried by the file-discovered event."""
    payload = asdict(record)
    payload.pop("size_bytes")
    payload["format"] = record.format.value
    return payload
