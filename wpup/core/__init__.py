from wpup.core.metadata import build_metadata
from wpup.core.package import Package, extract_metadata

__all__ = ["Package", "build_metadata", "extract_metadata"]
