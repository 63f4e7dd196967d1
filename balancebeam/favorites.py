"""Favorites collection and display preferences.

Saved budgets are kept as one JSON list under a single storage key.
Every change reads the current list, modifies it and writes the whole
list back; there is no partial update and no update-in-place. Saving an
edited copy of a loaded budget therefore creates a second entry.
"""

from __future__ import annotations

import json
import logging
from typing import List, Optional

from .config import FAVORITES_KEY, SETTINGS_KEY
from .exceptions import EmptySnapshotError
from .models import BudgetSnapshot, EditingState, Preferences
from .storage import KeyValueStore

logger = logging.getLogger(__name__)


class SnapshotStore:
    """Ordered collection of saved budgets."""

    def __init__(self, store: KeyValueStore, key: str = FAVORITES_KEY):
        self.store = store
        self.key = key
        self._snapshots: List[BudgetSnapshot] = self.load_all()

    @property
    def snapshots(self) -> List[BudgetSnapshot]:
        """Snapshots as of the last read or write."""
        return list(self._snapshots)

    def load_all(self) -> List[BudgetSnapshot]:
        """Read the persisted collection.

        Missing or undecodable data yields an empty list. Entries that
        cannot be decoded are skipped individually.
        """
        raw = self.store.get(self.key)
        if not raw:
            self._snapshots = []
            return []
        try:
            payload = json.loads(raw)
        except (json.JSONDecodeError, RecursionError) as exc:
            logger.warning("Discarding corrupt favorites payload: %s", exc)
            self._snapshots = []
            return []
        if not isinstance(payload, list):
            logger.warning("Discarding favorites payload of type %s", type(payload).__name__)
            self._snapshots = []
            return []

        snapshots: List[BudgetSnapshot] = []
        for entry in payload:
            try:
                snapshots.append(BudgetSnapshot.from_dict(entry))
            except (AttributeError, KeyError, TypeError, ValueError) as exc:
                logger.warning("Skipping malformed favorite: %s", exc)
        self._snapshots = snapshots
        return list(snapshots)

    def _write(self, snapshots: List[BudgetSnapshot]) -> None:
        self.store.set(self.key, json.dumps([snapshot.to_dict() for snapshot in snapshots]))
        self._snapshots = list(snapshots)

    def save(self, snapshot: BudgetSnapshot) -> None:
        """Append ``snapshot`` and persist the whole collection.

        Raises:
            EmptySnapshotError: If the snapshot has no items. The
                collection is left unchanged.
        """
        if not snapshot.items:
            raise EmptySnapshotError("Please add some budget items first")
        snapshots = self.load_all()
        snapshots.append(snapshot)
        self._write(snapshots)
        logger.info("Saved favorite %r (%s) with %d items", snapshot.title, snapshot.id, len(snapshot.items))

    def remove(self, snapshot_id: str) -> List[BudgetSnapshot]:
        """Remove the snapshot with ``snapshot_id``; unknown ids are ignored."""
        snapshots = self.load_all()
        remaining = [snapshot for snapshot in snapshots if snapshot.id != snapshot_id]
        if len(remaining) == len(snapshots):
            logger.debug("Favorite %s not found; nothing removed", snapshot_id)
        else:
            logger.info("Removed favorite %s", snapshot_id)
        self._write(remaining)
        return list(remaining)

    def get(self, snapshot_id: str) -> Optional[BudgetSnapshot]:
        for snapshot in self.load_all():
            if snapshot.id == snapshot_id:
                return snapshot
        return None

    @staticmethod
    def load(snapshot: BudgetSnapshot) -> EditingState:
        """Copy a snapshot into a fresh editing state.

        The returned lists are new objects, so editing them never touches
        the snapshot or what is persisted for it.
        """
        return EditingState(
            items=list(snapshot.items),
            title=snapshot.title,
            savings_goal=snapshot.savings_goal,
            chart_type=snapshot.chart_type,
            color_theme=list(snapshot.color_theme),
        )

    def __len__(self) -> int:
        return len(self._snapshots)


class PreferencesStore:
    """Persisted display preferences (currently just the animation flag)."""

    def __init__(self, store: KeyValueStore, key: str = SETTINGS_KEY):
        self.store = store
        self.key = key

    def load(self) -> Preferences:
        raw = self.store.get(self.key)
        if not raw:
            return Preferences()
        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, RecursionError) as exc:
            logger.warning("Discarding corrupt settings payload: %s", exc)
            return Preferences()
        if not isinstance(data, dict):
            return Preferences()
        return Preferences.from_dict(data)

    def save(self, preferences: Preferences) -> None:
        self.store.set(self.key, json.dumps(preferences.to_dict()))
