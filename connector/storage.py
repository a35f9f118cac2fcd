"""Browser local-storage stand-ins (string keys and values)."""

import json
from pathlib import Path


class MemoryStorage:
	"""Per-process storage; what a single tab sees."""

	def __init__(self, initial: dict[str, str] | None = None):
		self._items = dict(initial or {})

	def get_item(self, key: str) -> str | None:
		return self._items.get(key)

	def set_item(self, key: str, value: str) -> None:
		self._items[key] = str(value)

	def remove_item(self, key: str) -> None:
		self._items.pop(key, None)


class JsonFileStorage(MemoryStorage):
	"""
	Storage that survives restarts by mirroring every write to a JSON file
	"""

	def __init__(self, path):
		self.path = Path(path)
		initial = json.loads(self.path.read_text("utf-8")) if self.path.exists() else {}
		super().__init__(initial)

	def set_item(self, key: str, value: str) -> None:
		super().set_item(key, value)
		self._flush()

	def remove_item(self, key: str) -> None:
		super().remove_item(key)
		self._flush()

	def _flush(self) -> None:
		self.path.parent.mkdir(parents=True, exist_ok=True)
		self.path.write_text(json.dumps(self._items, indent=2), "utf-8")
