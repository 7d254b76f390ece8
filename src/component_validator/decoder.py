"""Split a YAML or JSON byte stream into decoded manifest documents."""

import logging
from pathlib import Path

import yaml

from component_validator.validation import Document

logger = logging.getLogger(__name__)


class ManifestDecodeError(ValueError):
    """Raised when the input stream cannot be read as text at all."""

    def __init__(self, message: str, source: str | None = None):
        self.source = source
        super().__init__(f"{source or '<input>'}: {message}")


def _describe_yaml_error(error: yaml.YAMLError) -> str:
    mark = getattr(error, "problem_mark", None)
    problem = getattr(error, "problem", None) or str(error)
    if mark is None:
        return problem
    return f"line {mark.line + 1}: {problem}"  # 0-indexed to 1-indexed


def decode_documents(source: str | bytes, source_name: str | None = None) -> list[Document]:
    """Decode a multi-document YAML stream. JSON is read as YAML.

    Empty documents (for example a trailing ``---``) are dropped; the remaining
    documents are numbered from 1 in stream order. When the stream turns
    malformed, every document decoded before that point is kept and the broken
    one is returned as a document carrying ``error``. PyYAML cannot resume
    after a syntax error, so decoding stops there.

    Raises:
        ManifestDecodeError: If the bytes are not valid UTF-8
    """
    if isinstance(source, bytes):
        try:
            source = source.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ManifestDecodeError(f"input is not valid UTF-8: {e}", source_name) from e

    documents: list[Document] = []
    stream = yaml.safe_load_all(source)
    while True:
        try:
            value = next(stream)
        except StopIteration:
            break
        except yaml.YAMLError as e:
            reason = _describe_yaml_error(e)
            logger.debug(f"Stopped decoding {source_name or '<input>'} at {reason}")
            documents.append(
                Document(body=None, position=len(documents) + 1, source=source_name, error=reason)
            )
            break
        if value is not None:
            documents.append(Document(body=value, position=len(documents) + 1, source=source_name))

    logger.debug(f"Decoded {len(documents)} document(s) from {source_name or '<input>'}")
    return documents


def load_documents(path: str | Path) -> list[Document]:
    """Read a manifest file and decode every document in it.

    Raises:
        FileNotFoundError: If the file does not exist
        ManifestDecodeError: If the file is not valid UTF-8
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Manifest file not found: {path}")
    return decode_documents(path.read_bytes(), str(path))
