from typing import Optional, Sequence

from meshsniff.core.models import ModelFormat
from meshsniff.core.classification.signatures import (
    EXTENSION_SIGNATURES,
    MAGIC_SIGNATURES,
    SignatureEntry,
)


class Classifier:
    """
    Decides the 3D format of a resource from its URL and, optionally,
    the leading bytes of its body. Pure: no I/O, no state beyond the tables.
    """
    def __init__(self,
                 extension_table: Sequence[SignatureEntry] = EXTENSION_SIGNATURES,
                 magic_table: Sequence[SignatureEntry] = MAGIC_SIGNATURES):
        self.extension_table = tuple(extension_table)
        self.magic_table = tuple(magic_table)

    def classify_by_extension(self, url: str) -> Optional[ModelFormat]:
        # Containment, not suffix: "model.glb?v=2" must match. This also means
        # "/x.objects/page.html" matches .obj.
        lower_url = url.lower()
        for entry in self.extension_table:
            if any(ext in lower_url for ext in entry.extensions):
                return entry.format
        return None

    def classify_by_magic(self, prefix: bytes) -> Optional[ModelFormat]:
        if not prefix:
            return None
        for entry in self.magic_table:
            if len(prefix) >= len(entry.magic) and prefix.startswith(entry.magic):
                return entry.format
        return None

    def classify(self, url: str, prefix: Optional[bytes] = None) -> Optional[ModelFormat]:
        """Extension pass first; magic pass only when prefix bytes are supplied."""
        detected = self.classify_by_extension(url)
        if detected is not None or prefix is None:
            return detected
        return self.classify_by_magic(prefix)

classifier = Classifier()
