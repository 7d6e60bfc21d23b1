import os
import logging
from typing import Dict, Optional, Protocol

import exifread

from ..exceptions import FileAccessError, MissingFileError
from ..models import FileRecord, FilterConfig
from ..scanning.hasher import FileHasher


class MetadataReader(Protocol):
    """Source of embedded (image-specific) metadata for a file."""

    def read(self, path: str) -> Dict[str, str]:
        ...


class NullMetadataReader:
    """
    Placeholder reader: embedded metadata is not extracted yet.

    Always succeeds with an empty mapping. Swap in ExifMetadataReader (or any
    MetadataReader) to get real values.
    """

    def read(self, path: str) -> Dict[str, str]:
        return {}


class ExifMetadataReader:
    """
    Reads EXIF tags with 'exifread'.

    Opt-in only. Files without EXIF data yield an empty mapping.
    """

    # Tags worth showing in a report; the full set is very noisy.
    DEFAULT_TAGS = (
        'Image Make',
        'Image Model',
        'EXIF DateTimeOriginal',
        'EXIF ExifImageWidth',
        'EXIF ExifImageLength',
        'Image Orientation',
    )

    def __init__(self, tags: Optional[tuple] = DEFAULT_TAGS):
        self.tags = tags

    def read(self, path: str) -> Dict[str, str]:
        try:
            with open(path, 'rb') as f:
                # details=False skips makernotes and thumbnails
                tags = exifread.process_file(f, details=False)
        except FileNotFoundError as e:
            raise MissingFileError(f"File not found: {e}", path=path, stage="extract") from e
        except OSError as e:
            raise FileAccessError(f"Failed to read metadata: {e}", path=path, stage="extract") from e

        wanted = self.tags if self.tags is not None else tags.keys()
        return {name: str(tags[name]).strip() for name in wanted if name in tags}


class MetadataExtractor:
    """
    Builds a FileRecord for a single path.

    Every call stats (and, if asked, hashes) the file again; nothing is cached.
    """

    def __init__(self, hasher: Optional[FileHasher] = None, reader: Optional[MetadataReader] = None):
        self.hasher = hasher or FileHasher()
        self.reader = reader or NullMetadataReader()

    def extract(self, path, options: FilterConfig) -> FileRecord:
        """
        Raises:
            MissingFileError: path does not exist.
            FileAccessError: path cannot be stated or read.
        """
        path = os.fspath(path)
        try:
            st = os.stat(path)
        except FileNotFoundError as e:
            raise MissingFileError(f"File not found: {path}", path=path, stage="extract") from e
        except OSError as e:
            raise FileAccessError(f"Cannot stat file: {e}", path=path, stage="extract") from e

        content_hash = None
        if options.compute_hash:
            content_hash = self.hasher.md5(path)

        meta = None
        if options.compute_meta:
            meta = self.reader.read(path)

        logging.debug(f"Extracted {path}: size={st.st_size} hash={content_hash}")

        # size_bytes comes from the stat regardless of compute_size;
        # the flag only decides whether it is displayed.
        return FileRecord(
            name=os.path.basename(path),
            size_bytes=st.st_size,
            content_hash=content_hash,
            meta=meta,
        )
