"""Common-affix text diffing used to sync plain-text edits into spans."""

from __future__ import annotations

from typing import NamedTuple


class TextEdit(NamedTuple):
    """Replace ``delete_length`` characters at ``start`` with ``inserted_text``."""

    start: int
    delete_length: int
    inserted_text: str

    @property
    def is_noop(self) -> bool:
        return self.delete_length == 0 and not self.inserted_text


def compute_text_edit(old_text: str, new_text: str) -> TextEdit:
    """Reduce ``old_text -> new_text`` to a single delete + insert.

    The common prefix is measured first; the common suffix is bounded by what
    remains of the shorter string so the two never overlap.
    """

    limit = min(len(old_text), len(new_text))

    prefix = 0
    while prefix < limit and old_text[prefix] == new_text[prefix]:
        prefix += 1

    suffix = 0
    while (
        suffix < limit - prefix
        and old_text[len(old_text) - 1 - suffix] == new_text[len(new_text) - 1 - suffix]
    ):
        suffix += 1

    return TextEdit(
        start=prefix,
        delete_length=len(old_text) - prefix - suffix,
        inserted_text=new_text[prefix : len(new_text) - suffix],
    )


__all__ = ["TextEdit", "compute_text_edit"]
