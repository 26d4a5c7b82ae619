"""Document adapter: YAML text and files to HostDocument and back."""

from lv2hostconfig.document.yaml_document import dump_document, parse_document, read_document, write_document

__all__ = [
    "dump_document",
    "parse_document",
    "read_document",
    "write_document",
]
