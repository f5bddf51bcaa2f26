from .catalog import Catalog
from .notifier import Notifier
from .pipeline import DetectionPipeline

__all__ = ["Catalog", "DetectionPipeline", "Notifier"]
