import json
import logging
import threading
import time
from datetime import date

from .config import Config
from .errors import MalformedStorageError, PersistenceError
from .models import ALL_CATEGORIES, ActivityRecord, build_activity

logger = logging.getLogger(__name__)


class ActivityStore:
    """Ordered activity history; the only writer of the persisted blob.

    Records are kept in insertion order. Every mutating call persists the whole
    sequence under one key. If persisting fails the in-memory change is rolled
    back and the call returns False, so memory and storage never diverge.
    Successful mutations notify subscribers synchronously.
    """

    def __init__(self, storage, key=None, clock=None):
        self.storage = storage
        self.key = key or Config.STORAGE_KEY
        self.clock = clock or date.today
        self.data = []
        self.lock = threading.RLock()
        self.listeners = []
        self._last_id = 0

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def load(self):
        """Read the persisted history.

        A missing blob, invalid JSON or a non-list value means an empty
        history. Individual records that fail to decode are skipped.
        """
        with self.lock:
            blob = self.storage.get_blob(self.key)
            if blob is None:
                logger.info("No stored activities found, starting empty.")
                self.data = []
            else:
                try:
                    self.data = self._decode(blob)
                    logger.info(f"Loaded {len(self.data)} activities from storage")
                except MalformedStorageError as e:
                    logger.warning(f"Ignoring malformed activity data: {e}")
                    self.data = []
            self._last_id = max((r.id for r in self.data), default=0)
            return list(self.data)

    def _decode(self, blob):
        try:
            raw = json.loads(blob)
        except ValueError as e:
            raise MalformedStorageError(f"invalid JSON: {e}") from e
        if not isinstance(raw, list):
            raise MalformedStorageError(f"expected a list, got {type(raw).__name__}")

        # Bad entries are dropped one by one; the rest of the history survives
        records = []
        seen_ids = set()
        for item in raw:
            try:
                record = ActivityRecord.from_dict(item)
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                logger.warning(f"Skipping malformed activity {item!r}: {e}")
                continue
            if record.id in seen_ids:
                logger.warning(f"Skipping activity with duplicate id {record.id}")
                continue
            seen_ids.add(record.id)
            records.append(record)
        return records

    def _save(self):
        try:
            blob = json.dumps([r.to_dict() for r in self.data])
        except (TypeError, ValueError) as e:
            raise PersistenceError(f"Could not serialize activities: {e}") from e
        if not self.storage.set_blob(self.key, blob):
            raise PersistenceError("Storage rejected the write")

    def _erase(self):
        if not self.storage.clear_blob(self.key):
            raise PersistenceError("Storage rejected the clear")

    def _commit(self, previous, action, persist=None):
        """Persist the current sequence, restoring *previous* if that fails."""
        try:
            (persist or self._save)()
        except PersistenceError as e:
            logger.error(f"Error saving activities ({action}), rolling back: {e}")
            self.data = previous
            return False
        self._notify()
        return True

    # ------------------------------------------------------------------
    # Change notification
    # ------------------------------------------------------------------

    def subscribe(self, callback):
        self.listeners.append(callback)

    def _notify(self):
        for callback in list(self.listeners):
            try:
                callback(self)
            except Exception:
                logger.exception("Activity listener failed")

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def next_id(self) -> int:
        # Millisecond timestamp, bumped when two records land in the same millisecond
        with self.lock:
            candidate = int(time.time() * 1000)
            if candidate <= self._last_id:
                candidate = self._last_id + 1
            self._last_id = candidate
            return candidate

    def create(self, form_data):
        """Validate form input, build a record and add it.

        Raises ValidationError for invalid input. Returns the new record, or
        None when it could not be persisted.
        """
        record = build_activity(form_data, self.clock(), self.next_id())
        return record if self.add(record) else None

    def add(self, record) -> bool:
        """Append *record* and persist it.

        A record whose id is already stored is refused without a write.
        """
        with self.lock:
            if self._index_of(record.id) != -1:
                logger.warning(f"Add: activity {record.id} already exists")
                return False
            previous = list(self.data)
            self.data.append(record)
            self._last_id = max(self._last_id, record.id)
            if self._commit(previous, "add"):
                logger.info(f"Activity saved: {record!r}")
                return True
            return False

    def _index_of(self, activity_id):
        for i, record in enumerate(self.data):
            if record.id == activity_id:
                return i
        return -1

    def delete_by_id(self, activity_id) -> bool:
        """Remove the record with *activity_id*.

        An unknown id is a no-op that returns False without touching storage.
        """
        with self.lock:
            index = self._index_of(activity_id)
            if index == -1:
                logger.warning(f"Delete: activity {activity_id} not found")
                return False
            previous = list(self.data)
            del self.data[index]
            return self._commit(previous, "delete")

    def update_by_id(self, activity_id, fields) -> bool:
        """Shallow-merge *fields* into the matching record.

        The merged record is validated again (raises ValidationError). An
        unknown id is a no-op that returns False without touching storage.
        """
        with self.lock:
            index = self._index_of(activity_id)
            if index == -1:
                logger.warning(f"Update: activity {activity_id} not found")
                return False

            current = self.data[index]
            merged = current.to_dict()
            changes = {k: v for k, v in fields.items() if k not in ("id", "createdAt")}
            if ("hours" in changes or "minutes" in changes) and "durationMinutes" not in changes:
                # Re-derive the duration from whichever of hours/minutes changed
                merged.pop("durationMinutes", None)
            merged.update(changes)

            updated = build_activity(merged, self.clock(), current.id, created_at=current.created_at)

            previous = list(self.data)
            self.data[index] = updated
            return self._commit(previous, "update")

    def clear(self) -> bool:
        with self.lock:
            previous = list(self.data)
            self.data = []
            if self._commit(previous, "clear", persist=self._erase):
                logger.info("All activities have been cleared")
                return True
            return False

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_data(self):
        with self.lock:
            return list(self.data)

    def get(self, activity_id):
        with self.lock:
            index = self._index_of(activity_id)
            return self.data[index] if index != -1 else None

    def by_category(self, category):
        with self.lock:
            if category == ALL_CATEGORIES:
                return list(self.data)
            return [r for r in self.data if r.category == category]

    def list_activities(self, category=ALL_CATEGORIES):
        """Category selection, newest date first (stable for equal dates)."""
        return sorted(self.by_category(category), key=lambda r: r.date, reverse=True)
