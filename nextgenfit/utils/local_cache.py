# nextgenfit/utils/local_cache.py
import json
import os
import re
from typing import Any

ROUTINE_KEY = "workout_routine"
ONBOARDING_KEY = "user_profile_local"

_SAFE_NAME = re.compile(r"[^A-Za-z0-9_.-]")


class LocalCache:
    """
    Client-local key-value store: one directory per client, one JSON file per key.
    Mirrors what a browser's localStorage holds for one device.
    """

    def __init__(self, root_dir: str, namespace: str = "default"):
        namespace = _SAFE_NAME.sub("_", namespace or "default").lstrip(".")[:64] or "default"
        self.path = os.path.join(root_dir, namespace)

    def _file(self, key: str) -> str:
        return os.path.join(self.path, f"{_SAFE_NAME.sub('_', key)}.json")

    def get(self, key: str) -> Any:
        try:
            with open(self._file(key), encoding="utf-8") as f:
                return json.load(f)
        except FileNotFoundError:
            return None

    def set(self, key: str, value: Any) -> None:
        os.makedirs(self.path, exist_ok=True)
        target = self._file(key)
        tmp = target + ".tmp"
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(value, f, ensure_ascii=False)
        os.replace(tmp, target)

    def remove(self, key: str) -> None:
        try:
            os.remove(self._file(key))
        except FileNotFoundError:
            pass
