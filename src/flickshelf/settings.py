"""Per-list display settings.

Settings are read-only here. They come from the [lists] section of the
configuration; whatever edits them is responsible for writing them back.
"""

from __future__ import annotations

from collections.abc import Mapping

from flickshelf.ordering import ListSetting, ListType, default_setting


class ListSettings:
    """Lookup of saved list settings with per-type defaults."""

    def __init__(self, saved: Mapping[str, ListSetting] | None = None) -> None:
        self._saved = dict(saved or {})

    def get(self, list_id: str) -> ListSetting | None:
        """Get the saved setting for a list, if there is one."""
        return self._saved.get(list_id)

    def setting_for(self, list_id: str, list_type: ListType) -> ListSetting:
        """Get the setting to use for a list.

        Args:
            list_id: Stable id of the list, e.g. a library or season id.
            list_type: What the list contains.

        Returns:
            The saved setting, or the default for the list type.
        """
        saved = self._saved.get(list_id)
        if saved is not None:
            return saved
        return default_setting(list_type)

    def __len__(self) -> int:
        return len(self._saved)
