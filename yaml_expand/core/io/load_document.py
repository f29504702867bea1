from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

import yaml

from yaml_expand.core.errors import DocumentLoadError, DocumentWriteError


def load_documents(path: str) -> list[Any]:
    """Load a YAML/JSON file as a list of documents.

    YAML streams keep every document (`---` separated); JSON is always a single
    document. Shapes are not checked: any tree is a valid expansion input.
    """

    p = Path(path)
    if not p.exists():
        raise DocumentLoadError(
            code="E_FILE_NOT_FOUND",
            message="file does not exist",
            file=str(p),
        )

    suffix = p.suffix.lower()
    try:
        raw_text = p.read_text(encoding="utf-8")
    except Exception as e:  # pragma: no cover
        raise DocumentLoadError(code="E_FILE_READ", message=str(e), file=str(p)) from e

    try:
        if suffix in {".yaml", ".yml"}:
            docs = list(yaml.safe_load_all(raw_text))
        elif suffix == ".json":
            docs = [json.loads(raw_text)]
        else:
            raise DocumentLoadError(
                code="E_UNSUPPORTED_FORMAT",
                message="supported formats are .yaml/.yml and .json",
                file=str(p),
            )
    except DocumentLoadError:
        raise
    except Exception as e:
        code = "E_YAML_PARSE" if suffix in {".yaml", ".yml"} else "E_JSON_PARSE"
        raise DocumentLoadError(code=code, message=str(e), file=str(p)) from e

    # An empty YAML stream still counts as one (null) document.
    return docs or [None]


def dump_documents(docs: list[Any], path: Optional[str] = None) -> str:
    text = yaml.safe_dump_all(docs, sort_keys=False, default_flow_style=False, allow_unicode=True)
    if path is None:
        return text

    p = Path(path)
    try:
        if str(p.parent) not in (".", ""):
            p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(text, encoding="utf-8")
    except OSError as e:
        raise DocumentWriteError(code="E_FILE_WRITE", message=str(e), file=str(p)) from e
    return text
