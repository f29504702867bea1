"""Placeholder expansion of `|expand`-tagged keys.

Replacement lists are loaded once from a directory of `.txt` files and then
applied to every tagged value in a single pass over the document tree.
"""
