from __future__ import annotations

import logging
from pathlib import Path

from yaml_expand.core.errors import NoReplacementsFoundError, ReplacementLoadError

logger = logging.getLogger(__name__)

REPLACEMENT_SUFFIX = ".txt"


def placeholder_for(name: str) -> str:
    return f"%{name}%"


def load_replacements(directory: str | Path) -> dict[str, list[str]]:
    """Build the placeholder -> replacement list mapping from a directory.

    Each `<name>.txt` file becomes `%<name>%`, mapped to its lines with
    surrounding whitespace stripped. Files are visited in name order so the
    placeholder order is reproducible. Empty files are skipped.

    A directory that cannot be listed counts as empty; a `.txt` file that
    cannot be read aborts the load.
    """
    d = Path(directory)
    out: dict[str, list[str]] = {}

    try:
        entries = sorted(d.iterdir(), key=lambda p: p.name)
    except OSError as e:
        logger.warning("cannot list replacement directory %s: %s", d, e)
        entries = []

    for p in entries:
        if not p.is_file() or p.suffix != REPLACEMENT_SUFFIX:
            logger.debug("ignoring %s", p)
            continue

        values = read_replacement_file(p)
        if not values:
            logger.debug("skipping empty replacement file %s", p)
            continue

        out[placeholder_for(p.stem)] = values
        logger.debug("loaded %d replacement(s) for %s from %s", len(values), placeholder_for(p.stem), p)

    if not out:
        raise NoReplacementsFoundError(
            code="E_NO_REPLACEMENTS",
            message=f"no {REPLACEMENT_SUFFIX} replacement files found",
            file=str(d),
        )
    return out


def read_replacement_file(path: Path) -> list[str]:
    """Return the stripped lines of `path`, split on "\\n" only.

    A lone "\\r" stays inside its line; a trailing newline adds no empty line.
    """
    try:
        with path.open("r", encoding="utf-8", newline="") as f:
            text = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise ReplacementLoadError(code="E_REPLACEMENT_READ", message=str(e), file=str(path)) from e

    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line.strip() for line in lines]
