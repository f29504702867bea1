from __future__ import annotations

import logging
from typing import Any

logger = logging.getLogger(__name__)

EXPAND_TAG = "|expand"


def expand_document(doc: Any, replacements: dict[str, list[str]]) -> tuple[Any, bool, bool]:
    """Return (new_doc, expand_found, expanded).

    - Mapping: keys containing `|expand` lose the tag and their value goes
      through substitute_value(); every other value is expanded recursively.
    - Sequence: every element is expanded recursively.
    - Anything else is returned as is.

    The flags only describe tagged keys held directly by `doc`. Flags of nested
    calls are dropped, so a tag two mapping levels down leaves them False.
    """

    expand_found = False
    expanded = False

    if isinstance(doc, dict):
        out: dict[Any, Any] = {}
        for key, value in doc.items():
            if isinstance(key, str) and EXPAND_TAG in key:
                expand_found = True
                new_key = key.replace(EXPAND_TAG, "", 1)
                new_value = substitute_value(value, replacements)
                # identity first: NaN is never == itself
                if new_value is not value and new_value != value:
                    expanded = True
                logger.debug("expanded key %r -> %r", key, new_key)
                out[new_key] = new_value
            else:
                out[key] = expand_document(value, replacements)[0]
        return out, expand_found, expanded

    if isinstance(doc, list):
        return [expand_document(item, replacements)[0] for item in doc], expand_found, expanded

    return doc, expand_found, expanded


def substitute_value(value: Any, replacements: dict[str, list[str]]) -> Any:
    """Apply placeholder substitution to the value of a tagged key.

    Strings yield one variant per replacement of every placeholder they
    contain, in mapping order. Several placeholders add up, they do not
    multiply: "%a%-%b%" with 2 and 3 values gives 5 strings, each with only
    one of the placeholders replaced. A string with no placeholder comes back
    unchanged, not wrapped in a list.

    Lists and mappings are not substituted at this level; they go through
    expand_document() so tagged keys nested inside them still work.
    """

    if isinstance(value, str):
        variants: list[str] = []
        for placeholder, replace_list in replacements.items():
            if placeholder in value:
                variants.extend(value.replace(placeholder, r) for r in replace_list)
        if not variants:
            return value
        return variants

    if isinstance(value, list):
        return [expand_document(item, replacements)[0] for item in value]

    return expand_document(value, replacements)[0]


def expand_documents(
    docs: list[Any], replacements: dict[str, list[str]]
) -> tuple[list[Any], bool, bool]:
    """Expand every document of a stream; flags are OR-ed across documents."""

    out: list[Any] = []
    expand_found = False
    expanded = False
    for doc in docs:
        new_doc, found, changed = expand_document(doc, replacements)
        out.append(new_doc)
        expand_found = expand_found or found
        expanded = expanded or changed
    return out, expand_found, expanded
