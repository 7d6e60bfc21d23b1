"""
Compressor backed by a remote "shrink" HTTP service (TinyPNG/Tinify API).

Per file: dispatch the bytes, interpret the JSON answer, fetch the
compressed asset from the returned URL and persist it locally. The first
failing step ends the file with a typed error.
"""
import os
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional

import httpx

from .. import config
from ..classification.kinds import FileKind, default_kinds, kind_for
from ..exceptions import (
    ConfigurationError,
    FileAccessError,
    RemoteError,
    TransportError,
    UnsupportedTypeError,
)
from ..models import FileRecord, ShrinkResponse


@dataclass(frozen=True)
class ShrinkServiceConfig:
    """Endpoint and credential for the shrink service."""
    api_key: str
    endpoint: str = config.SHRINK_ENDPOINT
    username: str = config.SHRINK_AUTH_USER
    timeout: float = config.SHRINK_TIMEOUT_SEC

    @classmethod
    def from_env(cls, environ=None) -> 'ShrinkServiceConfig':
        env = os.environ if environ is None else environ
        api_key = env.get(config.ENV_API_KEY, "")
        if not api_key:
            raise ConfigurationError(f"Missing {config.ENV_API_KEY} in environment/.env")
        return cls(
            api_key=api_key,
            endpoint=env.get(config.ENV_ENDPOINT) or config.SHRINK_ENDPOINT,
            timeout=float(env.get(config.ENV_TIMEOUT) or config.SHRINK_TIMEOUT_SEC),
        )


def save_file(path: Path, data: bytes) -> None:
    """
    Writes `data` to `path`, creating parent directories.

    A failure to close the handle is logged, not raised.
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        f = open(path, 'wb')
    except OSError as e:
        raise FileAccessError(f"Cannot create output file: {e}", path=str(path), stage="persist") from e

    try:
        f.write(data)
    except OSError as e:
        raise FileAccessError(f"Failed to write output file: {e}", path=str(path), stage="persist") from e
    finally:
        try:
            f.close()
        except OSError as e:
            logging.error(f"Failed to close {path}: {e}")


class RemoteCompressor:
    """
    Default Compressor. Only kinds in `kinds` are sent to the service.

    The httpx client is created on demand unless one is injected; call
    close() (or use as a context manager) to release a client this
    object created.
    """

    def __init__(self,
                 service: ShrinkServiceConfig,
                 kinds: Optional[Iterable[FileKind]] = None,
                 output_dir: Path = config.OUTPUT_DIR,
                 client: Optional[httpx.Client] = None):
        self.service = service
        self.kinds: List[FileKind] = list(kinds) if kinds is not None else default_kinds()
        self.output_dir = Path(output_dir)
        self._client = client
        self._owns_client = client is None

    @property
    def client(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(timeout=self.service.timeout)
        return self._client

    def close(self) -> None:
        if self._owns_client and self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def output_path_for(self, path: str) -> Path:
        return self.output_dir / os.path.basename(path)

    def compress(self, path: str, record: Optional[FileRecord] = None) -> str:
        kind = kind_for(path, self.kinds)
        if kind is None:
            raise UnsupportedTypeError(f"Unsupported image type: {path}", path=path, stage="dispatch")

        output = self.output_path_for(path)
        logging.debug(f"Compressing {kind.label()} {path} -> {output}")

        response = self._dispatch(path)
        url = self._interpret(path, response)
        data = self._fetch(path, url)
        save_file(output, data)

        if record is not None and record.size_bytes:
            logging.info(f"Compressed {record.name}: {record.size_bytes} -> {len(data)} bytes")
        return str(output)

    # --- Steps ---

    def _dispatch(self, path: str) -> httpx.Response:
        """POSTs the raw file bytes with basic auth."""
        try:
            with open(path, 'rb') as f:
                response = self.client.post(
                    self.service.endpoint,
                    content=f,
                    auth=(self.service.username, self.service.api_key),
                )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise TransportError(f"Upload failed: {e}", path=path, stage="dispatch") from e
        except OSError as e:
            raise TransportError(f"Cannot read source for upload: {e}", path=path, stage="dispatch") from e
        return response

    def _interpret(self, path: str, response: httpx.Response) -> str:
        """Returns the result URL, or raises RemoteError."""
        try:
            payload = response.json()
            if not isinstance(payload, dict):
                raise ValueError("response is not a JSON object")
            shrink = ShrinkResponse.from_dict(payload)
        except (ValueError, TypeError) as e:
            raise RemoteError(
                f"Invalid response from shrink service (HTTP {response.status_code}): {e}",
                path=path, stage="interpret",
            ) from e

        if shrink.error:
            raise RemoteError(shrink.message or shrink.error, code=shrink.error, path=path, stage="interpret")
        if not shrink.result_url:
            raise RemoteError(shrink.message or "No output URL in response", path=path, stage="interpret")

        if shrink.output is not None and shrink.output.ratio:
            logging.debug(f"{path}: ratio {shrink.output.ratio:.3f}")
        return shrink.result_url

    def _fetch(self, path: str, url: str) -> bytes:
        try:
            response = self.client.get(url)
            response.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise TransportError(f"Download failed: {e}", path=path, stage="fetch") from e
        return response.content
