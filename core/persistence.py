import json
import os
import tempfile
from pathlib import Path
from typing import Optional, TypeVar

from loguru import logger
from pydantic import BaseModel

from .errors import SchemaVersionError

SCHEMA_VERSION = 1

ModelT = TypeVar("ModelT", bound=BaseModel)


class JsonBlobStore:
    """Each store is one named JSON blob, reloaded wholesale at startup."""

    def __init__(self, directory: str | os.PathLike, schema_version: int = SCHEMA_VERSION):
        self.directory = Path(directory)
        self.schema_version = schema_version

    def path_for(self, name: str) -> Path:
        return self.directory / f"{name}.json"

    def save(self, name: str, model: BaseModel) -> Path:
        self.directory.mkdir(parents=True, exist_ok=True)
        target = self.path_for(name)
        envelope = {
            "schema_version": self.schema_version,
            "data": model.model_dump(mode="json"),
        }

        fd, tmp_path = tempfile.mkstemp(dir=self.directory, prefix=f".{name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(envelope, fh, indent=2)
            os.replace(tmp_path, target)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

        logger.debug("Saved blob", name=name, path=str(target))
        return target

    def load(self, name: str, model_type: type[ModelT]) -> Optional[ModelT]:
        target = self.path_for(name)
        if not target.exists():
            return None

        with target.open(encoding="utf-8") as fh:
            envelope = json.load(fh)

        version = envelope.get("schema_version")
        if version != self.schema_version:
            raise SchemaVersionError(
                f"Blob {name} has schema version {version}, expected {self.schema_version}"
            )

        logger.debug("Loaded blob", name=name, path=str(target))
        return model_type.model_validate(envelope["data"])
