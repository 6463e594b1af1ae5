# src/atomforge/stores/blob.py
"""Local filesystem blob store implementation."""

import json
from pathlib import Path, PurePosixPath

from atomforge.exceptions import UploadError
from atomforge.stores.base import BlobStore

METADATA_DIR = ".metadata"


class LocalBlobStore(BlobStore):
    """Blob store writing objects under a root directory.

    Content type and cache policy of each object are kept in a JSON sidecar
    under `.metadata/` so a static file server can emit matching headers.

    Args:
        root_dir: Directory objects are written to. Created if missing.
        base_url: Prefix for public URLs. Defaults to a file:// URL of root_dir.
    """

    def __init__(self, root_dir: str, base_url: str | None = None) -> None:
        self.root = Path(root_dir)
        self.root.mkdir(parents=True, exist_ok=True)
        self.base_url = (base_url or self.root.resolve().as_uri()).rstrip("/")

    def _resolve(self, path: str) -> Path:
        relative = PurePosixPath(path)
        if relative.is_absolute() or ".." in relative.parts:
            raise UploadError(f"Invalid blob path: {path}")
        return self.root.joinpath(*relative.parts)

    def upload(
        self,
        path: str,
        data: bytes,
        content_type: str,
        cache_control: str,
        overwrite: bool = True,
    ) -> None:
        """Write an object and its metadata sidecar."""
        target = self._resolve(path)
        if target.exists() and not overwrite:
            raise UploadError(f"Upload failed: {path} already exists")
        metadata = self.root / METADATA_DIR / f"{path}.json"
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
            metadata.parent.mkdir(parents=True, exist_ok=True)
            metadata.write_text(
                json.dumps({"content_type": content_type, "cache_control": cache_control}),
                encoding="utf-8",
            )
        except OSError as e:
            raise UploadError(f"Upload failed for {path}: {e}") from e

    def metadata(self, path: str) -> dict[str, str] | None:
        """Return the stored content type and cache policy of an object."""
        sidecar = self.root / METADATA_DIR / f"{path}.json"
        if not sidecar.exists():
            return None
        return json.loads(sidecar.read_text(encoding="utf-8"))

    def public_url(self, path: str) -> str:
        """Return the public URL of an object."""
        return f"{self.base_url}/{path}"
