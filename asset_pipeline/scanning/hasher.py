import hashlib
import os

from .. import config
from ..exceptions import FileAccessError, MissingFileError


class FileHasher:
    """
    Content fingerprints for identification (not security).

    The whole file is always read; there is no partial or fallback hash.
    """

    def __init__(self, chunk_size: int = config.HASH_CHUNK_SIZE):
        self.chunk_size = chunk_size

    def md5(self, path) -> str:
        """Streams the file through MD5 and returns the lowercase hex digest."""
        h = hashlib.md5()
        try:
            with open(path, 'rb') as f:
                while chunk := f.read(self.chunk_size):
                    h.update(chunk)
        except FileNotFoundError as e:
            raise MissingFileError(f"File not found: {e}", path=os.fspath(path), stage="extract") from e
        except OSError as e:
            raise FileAccessError(f"Failed to hash file: {e}", path=os.fspath(path), stage="extract") from e
        return h.hexdigest()
