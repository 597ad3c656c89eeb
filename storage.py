# storage.py
import logging
import os
from typing import Dict, Optional

logger = logging.getLogger(__name__)

# ----------------------------
# Config & keys
# ----------------------------
DATA_DIR = "data"
MATERIALS_KEY = "gr_materials"
PRODUCTIONS_KEY = "gr_productions"


class JsonFileStore:
    """
    Key-value store keeping one JSON document per key under a data directory.
    load() returns the raw text (or None when nothing usable is stored);
    save() returns False instead of raising when the write fails.
    """

    def __init__(self, data_dir: str = DATA_DIR):
        self.data_dir = data_dir

    def path_for(self, key: str) -> str:
        return os.path.join(self.data_dir, f"{key}.json")

    def load(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        if not os.path.exists(path):
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Could not read {path}: {e}")
            return None

    def save(self, key: str, text: str) -> bool:
        path = self.path_for(key)
        try:
            os.makedirs(self.data_dir, exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                f.write(text)
        except OSError as e:
            logger.error(f"Failed to save {key} to {path}: {e}")
            return False
        return True

    def remove(self, key: str) -> None:
        path = self.path_for(key)
        if os.path.exists(path):
            os.remove(path)


class MemoryStore:
    """Dict-backed store for tests and throwaway sessions."""

    def __init__(self, initial: Optional[Dict[str, str]] = None, fail_writes: bool = False):
        self.data: Dict[str, str] = dict(initial or {})
        self.fail_writes = fail_writes
        self.writes = 0

    def load(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def save(self, key: str, text: str) -> bool:
        if self.fail_writes:
            logger.error(f"Failed to save {key}: store is not writable")
            return False
        self.data[key] = text
        self.writes += 1
        return True

    def remove(self, key: str) -> None:
        self.data.pop(key, None)
