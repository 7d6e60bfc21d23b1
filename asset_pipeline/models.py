from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional

from . import config
from .exceptions import AssetPipelineError


@dataclass(frozen=True)
class FilterConfig:
    """
    Options shared by every filter and extraction call in a run.
    """
    exclude_hidden: bool = True
    compute_size: bool = True
    compute_hash: bool = False
    compute_meta: bool = False


@dataclass(frozen=True)
class FileRecord:
    """
    Metadata gathered for one file.

    Optional fields are None when their flag was not requested
    (size_bytes is the exception: the stat always provides it).
    """
    name: str
    size_bytes: Optional[int] = None
    content_hash: Optional[str] = None
    meta: Optional[Dict[str, str]] = None


@dataclass(frozen=True)
class RemoteStoreConfig:
    """Credentials for a secondary upload target. Configuration surface only."""
    type: str = ""
    address: str = ""
    account: str = ""
    password: str = ""
    token: str = ""
    bucket: str = ""
    region: str = ""
    path: str = ""


@dataclass(frozen=True)
class CompressionConfig:
    enabled: bool = False
    quality: int = config.DEFAULT_QUALITY
    keep_original: bool = True
    auto_upload: bool = False
    remote: RemoteStoreConfig = field(default_factory=RemoteStoreConfig)


@dataclass(frozen=True)
class CompressionResult:
    """
    Outcome for a single file: the output path on success, or the failure reason.
    """
    source: str
    output: Optional[str] = None
    reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.output is not None and self.reason is None


@dataclass
class BatchResult:
    """
    Result of one orchestrator call.

    Unpacks as ``succeeded, error = batch``.
    """
    results: List[CompressionResult] = field(default_factory=list)
    error: Optional[AssetPipelineError] = None

    @property
    def succeeded(self) -> List[str]:
        return [r.output for r in self.results if r.ok]

    @property
    def failed(self) -> Optional[CompressionResult]:
        for r in self.results:
            if not r.ok:
                return r
        return None

    @property
    def ok(self) -> bool:
        return self.error is None

    def __iter__(self) -> Iterator:
        yield self.succeeded
        yield self.error


# --- Shrink service payload ---

@dataclass(frozen=True)
class ShrinkInput:
    size: int = 0
    type: str = ""


@dataclass(frozen=True)
class ShrinkOutput:
    size: int = 0
    type: str = ""
    width: int = 0
    height: int = 0
    ratio: float = 0.0
    url: str = ""


@dataclass(frozen=True)
class ShrinkResponse:
    input: Optional[ShrinkInput] = None
    output: Optional[ShrinkOutput] = None
    message: str = ""
    error: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> 'ShrinkResponse':
        """Build from the decoded JSON body, ignoring unknown keys."""
        inp = data.get('input')
        out = data.get('output')
        return cls(
            input=ShrinkInput(
                size=int(inp.get('size') or 0),
                type=str(inp.get('type') or ''),
            ) if isinstance(inp, dict) else None,
            output=ShrinkOutput(
                size=int(out.get('size') or 0),
                type=str(out.get('type') or ''),
                width=int(out.get('width') or 0),
                height=int(out.get('height') or 0),
                ratio=float(out.get('ratio') or 0.0),
                url=str(out.get('url') or ''),
            ) if isinstance(out, dict) else None,
            message=str(data.get('message') or ''),
            error=str(data.get('error') or ''),
        )

    @property
    def result_url(self) -> str:
        return self.output.url if self.output else ""
