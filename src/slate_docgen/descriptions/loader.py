"""Description loader — reads hand-written descriptions that override schema text.

Files live under ``<root>/definitions/<definition>/description.md`` and
``<root>/definitions/<definition>/<property>/description.md``, with folder
names lower-cased.
"""

import logging
from pathlib import Path

logger = logging.getLogger(__name__)

DEFINITIONS_DIR = "definitions"
DESCRIPTION_FILE = "description.md"


class DescriptionLoader:
    """Looks up hand-written descriptions for definitions and their properties."""

    def __init__(self, root: Path):
        self.root = Path(root) / DEFINITIONS_DIR
        logger.debug("Include hand-written descriptions is enabled (%s).", self.root)

    def definition_description(self, definition: str) -> str | None:
        return self._read(self.root / definition.lower())

    def property_description(self, definition: str, prop: str) -> str | None:
        return self._read(self.root / definition.lower() / prop.lower())

    def _read(self, folder: Path) -> str | None:
        path = folder / DESCRIPTION_FILE
        if not path.is_file():
            logger.debug("Description file is not readable: %s", path)
            return None
        text = path.read_text(encoding="utf-8").strip()
        if not text:
            logger.info("Description file %s is empty; using the description from the specification.", path)
            return None
        logger.info("Description file processed: %s", path)
        return text
