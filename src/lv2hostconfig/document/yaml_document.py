"""YAML reader and writer for host configuration documents.

Documents are loaded with PyYAML's BaseLoader, which resolves every scalar
to a string. Parameter values therefore keep their exact source text
("0.50" stays "0.50", not 0.5), and numeric fields such as referenceLevel
are converted by the pydantic models instead.
"""

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from lv2hostconfig.core.models import HostDocument
from lv2hostconfig.errors import DocumentError

logger = logging.getLogger(__name__)


def parse_document(text: str, path: Path | str | None = None) -> HostDocument:
    """Parse YAML text into a HostDocument.

    Args:
        text: YAML source.
        path: Source file, used in error messages only.

    Raises:
        DocumentError: If the text is not YAML or does not have the
            document shape.
    """
    try:
        data = yaml.load(text, Loader=yaml.BaseLoader)
    except yaml.YAMLError as e:
        raise DocumentError(f"Failed to parse config: {e}", path) from e

    if data is None:
        raise DocumentError("Config document is empty", path)
    if not isinstance(data, dict):
        raise DocumentError(f"Config document must be a mapping, got {type(data).__name__}", path)

    try:
        return HostDocument.model_validate(data)
    except ValidationError as e:
        raise DocumentError(f"Invalid config document: {e}", path) from e


def dump_document(document: HostDocument) -> str:
    """Serialize a HostDocument to YAML text."""
    data = document.model_dump(by_alias=True, exclude_none=True)
    return yaml.safe_dump(
        data,
        default_flow_style=False,
        allow_unicode=True,
        sort_keys=False,
    )


def read_document(path: Path | str) -> HostDocument:
    """Read and parse a YAML config file.

    Raises:
        DocumentError: If the file cannot be read or parsed.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise DocumentError(f"Failed to read config: {e.strerror or e}", path) from e

    document = parse_document(text, path)
    logger.debug("Read %d plugins from %s", len(document.plugins), path)
    return document


def write_document(document: HostDocument, path: Path | str) -> Path:
    """Write a HostDocument to a YAML file. Returns the path written.

    Raises:
        DocumentError: If the file cannot be written.
    """
    path = Path(path)
    text = dump_document(document)
    try:
        with open(path, "w", encoding="utf-8", newline="\n") as f:
            f.write(text)
    except OSError as e:
        raise DocumentError(f"Failed to write config: {e.strerror or e}", path) from e

    logger.debug("Wrote %d plugins to %s", len(document.plugins), path)
    return path
