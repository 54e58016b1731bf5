"""
Single-file JSON persistence for learning documents.

Every document lives in its own pretty-printed UTF-8 JSON file under the
workspace state directory and is read and written whole.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Generic, TypeVar

from pydantic import TypeAdapter, ValidationError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class LoadResult(Generic[T]):
    exists: bool
    document: T | None = None


class JsonDocumentStore(Generic[T]):
    def __init__(self, path: Path, document_type: Any):
        self.path = path
        self._adapter: TypeAdapter[T] = TypeAdapter(document_type)

    def read(self) -> T | None:
        """Load the document. Missing, unreadable or invalid files read as None."""
        try:
            raw = self.path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.warning(f"⚠️  Could not read {self.path}: {e}")
            return None

        try:
            return self._adapter.validate_json(raw)
        except ValidationError as e:
            logger.warning(f"⚠️  Ignoring invalid document {self.path}: {e.error_count()} errors")
            logger.debug(f"   Validation errors: {e}")
            return None

    def load(self) -> LoadResult[T]:
        document = self.read()
        return LoadResult(exists=document is not None, document=document)

    def write(self, document: T) -> None:
        """Write the document, creating the state directory. Failures propagate."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_bytes(self._adapter.dump_json(document, by_alias=True, indent=2))
        logger.debug(f"💾 Saved {self.path.name}")

    def exists(self) -> bool:
        return self.path.is_file()

    def delete(self) -> None:
        try:
            self.path.unlink()
            logger.debug(f"🗑️  Deleted {self.path.name}")
        except FileNotFoundError:
            pass
