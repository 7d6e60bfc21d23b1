import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence, TextIO

from .classification.filter import FileFilter
from .classification.kinds import FileKind, default_kinds
from .compression.base import Compressor
from .compression.orchestrator import CompressionOrchestrator
from .metadata.extract import MetadataExtractor
from .models import BatchResult, CompressionConfig, FileRecord, FilterConfig
from .reporting import TableReporter
from .scanning.filesystem import DiskScanner


@dataclass
class PipelineRun:
    """Everything one pass produced, keyed by kind label."""
    files: List[str] = field(default_factory=list)
    matched: Dict[str, List[str]] = field(default_factory=dict)
    records: Dict[str, List[FileRecord]] = field(default_factory=dict)
    compressed: Dict[str, BatchResult] = field(default_factory=dict)

    @property
    def error(self):
        for batch in self.compressed.values():
            if batch.error is not None:
                return batch.error
        return None


class AssetPipelineApp:
    def __init__(self,
                 filter_options: FilterConfig,
                 compression: Optional[CompressionConfig] = None,
                 kinds: Optional[Sequence[FileKind]] = None,
                 extractor: Optional[MetadataExtractor] = None,
                 reporter: Optional[TableReporter] = None,
                 stream: Optional[TextIO] = None,
                 progress: bool = True):
        self.filter_options = filter_options
        self.compression = compression or CompressionConfig()
        self.kinds = list(kinds) if kinds is not None else default_kinds()
        self.extractor = extractor or MetadataExtractor()
        self.reporter = reporter or TableReporter()
        self.stream = stream
        self.progress = progress

    def run(self, root: Path, compressor: Optional[Compressor] = None,
            report_csv: Optional[Path] = None) -> PipelineRun:
        """
        Executes one pass:
        1. Discover every file under root
        2. Filter per kind
        3. Extract metadata and print a table per kind
        4. Compress (if enabled), JPG group first, stopping at the first failure
        5. Print a table of the compressed outputs
        """
        run = PipelineRun()

        # --- Step 1: Discovery ---
        logging.info(f"Scanning {root}...")
        run.files = DiskScanner().list_files(root)
        logging.info(f"Found {len(run.files)} files.")

        # --- Step 2 & 3: Filter + Report ---
        all_records: List[FileRecord] = []
        for kind in self.kinds:
            label = kind.label()
            matched = FileFilter(kind, self.filter_options).filter_files(run.files)
            run.matched[label] = matched
            records = [self.extractor.extract(p, self.filter_options) for p in matched]
            run.records[label] = records
            all_records.extend(records)
            self.reporter.print_table(records, self.filter_options, title=f"{label} files:", stream=self.stream)

        if report_csv:
            self.reporter.write_csv(all_records, self.filter_options, report_csv)

        # --- Step 4: Compression ---
        if not self.compression.enabled:
            return run
        if compressor is None:
            raise ValueError("Compression is enabled but no compressor was supplied")

        if self.compression.auto_upload:
            logging.warning("Auto upload to remote storage is not supported; compressed files stay local.")

        orchestrator = CompressionOrchestrator(compressor, self.extractor, progress=self.progress)
        run.compressed = orchestrator.compress_groups(run.matched)

        # --- Step 5: Report outputs ---
        for label, batch in run.compressed.items():
            outputs = [self.extractor.extract(p, self.filter_options) for p in batch.succeeded]
            self.reporter.print_table(outputs, self.filter_options, title=f"Compressed {label} files:", stream=self.stream)

        if run.error is not None:
            logging.error(f"Compression failed: {run.error.describe()}")
        else:
            logging.info("Compression complete.")
        return run
