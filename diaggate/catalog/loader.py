import logging
import os
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import ValidationError

from diaggate.config import get_catalog_path
from diaggate.errors import ConfigurationError

from .catalog import MessageCatalog
from .models import CatalogDocument, MessageTemplate

logger = logging.getLogger(__name__)


class CatalogLoader:
    def __init__(self, path: Optional[str] = None, strict: bool = True, unresolved: Optional[str] = None):
        self.path = path or get_catalog_path()
        self.strict = strict
        self.unresolved = unresolved

    def load(self) -> MessageCatalog:
        """
        Load a catalog file, or every YAML catalog under a directory.
        Files starting with `_` are ignored. Duplicate ids are always an error.
        """
        base = Path(str(self.path)).resolve(strict=False)
        if not base.exists():
            raise ConfigurationError(f"Message catalog not found: {base}")

        templates: List[MessageTemplate] = []
        for file_path in self._catalog_files(base):
            try:
                templates.extend(self._load_file(file_path))
            except ConfigurationError:
                if self.strict:
                    raise
                logger.warning("Skipping message catalog %s", file_path, exc_info=True)

        catalog = MessageCatalog(templates, unresolved=self.unresolved)
        logger.debug("Loaded %d messages from %s", len(catalog), base)
        return catalog

    def _catalog_files(self, base: Path) -> List[Path]:
        if base.is_file():
            return [base]
        found: List[Path] = []
        for root, _, files in os.walk(base):
            for file in files:
                if file.startswith("_"):
                    continue
                if file.endswith(".yaml") or file.endswith(".yml"):
                    found.append(Path(root) / file)
        return sorted(found)

    def _load_file(self, file_path: Path) -> List[MessageTemplate]:
        try:
            with file_path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Failed to read message catalog {file_path}: {e}") from e
        # Handle empty files
        if not data:
            return []
        if not isinstance(data, dict):
            raise ConfigurationError(f"Message catalog {file_path} must be a mapping")
        try:
            document = CatalogDocument(**data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid message catalog {file_path}: {e}") from e
        return list(document.messages)


def load_default_catalog(unresolved: Optional[str] = None) -> MessageCatalog:
    return CatalogLoader(unresolved=unresolved).load()
