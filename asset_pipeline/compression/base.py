from typing import Optional, Protocol

from ..models import FileRecord


class Compressor(Protocol):
    """
    Compresses one file and returns the path of the compressed output.

    Implementations raise an AssetPipelineError subclass on failure.
    """

    def compress(self, path: str, record: Optional[FileRecord] = None) -> str:
        ...
