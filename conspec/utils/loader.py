"""Loading data documents to check against specs.

YAML is a superset of JSON, so one loader covers both formats.
"""

from pathlib import Path

import yaml

from conspec.errors import DocumentError


def load_document(document_path: str | Path):
    """Parse a YAML or JSON file and return its contents.

    Raises:
        DocumentError: the file is missing or does not parse.
    """
    path = Path(document_path)

    if not path.exists():
        raise DocumentError(f"File not found: {document_path}")

    try:
        with open(path) as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise DocumentError(f"Invalid YAML: {e}") from e


def to_plain(value):
    """Make a conformed value printable as JSON: tuples become lists, sets sorted lists."""
    if isinstance(value, dict):
        return {str(k): to_plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_plain(v) for v in value]
    if isinstance(value, (set, frozenset)):
        return sorted((to_plain(v) for v in value), key=repr)
    return value
