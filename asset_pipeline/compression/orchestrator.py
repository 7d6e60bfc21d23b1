import logging
from typing import Dict, Iterable, Mapping, Optional

from tqdm import tqdm

from ..exceptions import AssetPipelineError, FileAccessError
from ..metadata.extract import MetadataExtractor
from ..models import BatchResult, CompressionResult, FilterConfig
from .base import Compressor

# Only size and hash are needed before compressing
EXTRACT_OPTIONS = FilterConfig(exclude_hidden=False, compute_size=True, compute_hash=True, compute_meta=False)


class CompressionOrchestrator:
    """
    Runs a Compressor over a batch of files, one at a time.

    Fail-fast: the first extraction or compression error stops the batch.
    Files compressed before the failure stay on disk and are reported as
    succeeded; nothing is retried or rolled back.
    """

    def __init__(self,
                 compressor: Compressor,
                 extractor: Optional[MetadataExtractor] = None,
                 progress: bool = True):
        self.compressor = compressor
        self.extractor = extractor or MetadataExtractor()
        self.progress = progress

    def compress_batch(self, paths: Iterable[str], desc: str = "Compressing") -> BatchResult:
        paths = list(paths)
        batch = BatchResult()
        if not paths:
            return batch

        logging.info(f"Compressing {len(paths)} files...")

        for path in tqdm(paths, desc=desc, disable=not self.progress):
            try:
                record = self.extractor.extract(path, EXTRACT_OPTIONS)
                output = self.compressor.compress(path, record)
            except AssetPipelineError as e:
                self._fail(batch, path, e)
                break
            except OSError as e:
                self._fail(batch, path, FileAccessError(str(e), path=path))
                break

            batch.results.append(CompressionResult(source=path, output=output))
            logging.debug(f"Compressed {path} -> {output}")

        if batch.ok:
            logging.info(f"Compressed {len(batch.succeeded)} files.")
        return batch

    def compress_groups(self, groups: Mapping[str, Iterable[str]]) -> Dict[str, BatchResult]:
        """
        Compresses each group (e.g. JPG then PNG) in mapping order.

        Stops after the first group that fails; later groups are not
        attempted and do not appear in the result.
        """
        results: Dict[str, BatchResult] = {}
        for label, paths in groups.items():
            batch = self.compress_batch(paths, desc=f"Compressing {label}")
            results[label] = batch
            if not batch.ok:
                break
        return results

    def _fail(self, batch: BatchResult, path: str, error: AssetPipelineError) -> None:
        if error.path is None:
            error.path = path
        batch.results.append(CompressionResult(source=path, reason=error.message))
        batch.error = error
        logging.error(
            f"Compression stopped at {path} (stage: {error.stage or 'unknown'}): {error.message}. "
            f"{len(batch.succeeded)} files already compressed are kept."
        )
