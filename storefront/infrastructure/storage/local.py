import logging
import secrets
from pathlib import Path

from ...domain.ports.persistence import ImageStorage

logger = logging.getLogger(__name__)


class LocalImageStorage(ImageStorage):
    """Stores product images as files inside a single directory."""

    def __init__(self, directory: Path) -> None:
        directory.mkdir(parents=True, exist_ok=True)
        self._directory = directory

    @property
    def directory(self) -> Path:
        return self._directory

    def save(self, filename: str, data: bytes) -> str:
        suffix = Path(filename).suffix.lower()
        name = f"{secrets.token_hex(16)}{suffix}"
        (self._directory / name).write_bytes(data)
        logger.info("Stored product image %s (%d bytes)", name, len(data))
        return name

    def delete(self, name: str) -> None:
        # Names are generated by save(); anything with a path component is foreign.
        if Path(name).name != name:
            logger.warning("Refusing to delete image outside storage: %s", name)
            return
        (self._directory / name).unlink(missing_ok=True)
