"""Key/value blob storage the activity store persists through.

Both implementations expose the same three calls:

    get_blob(key)         -> str or None
    set_blob(key, value)  -> True on success, False on failure
    clear_blob(key)       -> True on success, False on failure

A failed read is reported as "absent" (None); callers decide what an absent
blob means.
"""

import json
import logging
import os
import tempfile

logger = logging.getLogger(__name__)


class MemoryStorage:
    """In-process storage, used for tests and throwaway sessions."""

    def __init__(self, initial=None):
        self.blobs = dict(initial or {})

    def get_blob(self, key):
        return self.blobs.get(key)

    def set_blob(self, key, value) -> bool:
        self.blobs[key] = value
        return True

    def clear_blob(self, key) -> bool:
        self.blobs.pop(key, None)
        return True


class JsonFileStorage:
    """Keeps every blob as a string value inside one JSON document on disk."""

    def __init__(self, path):
        self.path = path

    def _read_all(self):
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Could not read storage file {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Storage file {self.path} is not a key/value document, ignoring it")
            return {}
        return data

    def _write_all(self, data) -> bool:
        directory = os.path.dirname(os.path.abspath(self.path))
        try:
            os.makedirs(directory, exist_ok=True)
            # Write to a temp file first so a crash never leaves half a document behind
            fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".timewise_", suffix=".json")
            try:
                with os.fdopen(fd, 'w', encoding='utf-8') as f:
                    json.dump(data, f, indent=2)
                os.replace(tmp_path, self.path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.remove(tmp_path)
                raise
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Error saving storage file {self.path}: {e}")
            return False
        return True

    def get_blob(self, key):
        value = self._read_all().get(key)
        if value is None:
            return None
        return value if isinstance(value, str) else json.dumps(value)

    def set_blob(self, key, value) -> bool:
        data = self._read_all()
        data[key] = value
        return self._write_all(data)

    def clear_blob(self, key) -> bool:
        data = self._read_all()
        if key not in data:
            return True
        del data[key]
        return self._write_all(data)
