"""
Static signature tables.

Order matters: the first matching entry wins, so the tables double as the
tie-break policy.
"""
from dataclasses import dataclass
from typing import Tuple

from meshsniff.core.models import ModelFormat


@dataclass(frozen=True)
class SignatureEntry:
    format: ModelFormat
    extensions: Tuple[str, ...] = ()
    magic: bytes = b""


EXTENSION_SIGNATURES: Tuple[SignatureEntry, ...] = (
    SignatureEntry(ModelFormat.GLB, extensions=(".glb",)),
    SignatureEntry(ModelFormat.GLTF, extensions=(".gltf",)),
    SignatureEntry(ModelFormat.STL, extensions=(".stl",)),
    SignatureEntry(ModelFormat.OBJ, extensions=(".obj",)),
    SignatureEntry(ModelFormat.FBX, extensions=(".fbx",)),
    SignatureEntry(ModelFormat.PLY, extensions=(".ply",)),
    SignatureEntry(ModelFormat.USDZ, extensions=(".usdz",)),
)

MAGIC_SIGNATURES: Tuple[SignatureEntry, ...] = (
    SignatureEntry(ModelFormat.GLB, magic=b"glTF"),
    SignatureEntry(ModelFormat.FBX, magic=b"Kaydara FBX Binary  \x00\x1a\x00"),
    SignatureEntry(ModelFormat.PLY, magic=b"ply"),
    SignatureEntry(ModelFormat.STL, magic=b"solid"),  # ASCII STL only
    SignatureEntry(ModelFormat.USDZ, magic=b"PK\x03\x04"),  # any zip; weak
)

SHORTEST_MAGIC = min(len(entry.magic) for entry in MAGIC_SIGNATURES)
