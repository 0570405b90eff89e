"""TinyDB-backed storage used by the demo migrations and the CLI."""

from pathlib import Path

from tinydb import Query, TinyDB
from tinydb.storages import MemoryStorage

from .utils import ensure_dir


class BlockStorage:
    """
    Key/value storage state plus the last processed height.

    Entries live in the ``storage`` table as ``{"key": int, "value": str}``
    documents. The ``metadata`` table holds a single document with doc_id=1
    recording the last processed height and the last initialized height.
    """

    def __init__(self, db: TinyDB):
        """
        Initialize storage.

        Args:
            db: TinyDB database instance
        """
        self.db = db
        self.entries = db.table("storage")
        self.metadata = db.table("metadata")

    @classmethod
    def open(cls, path: Path | None = None) -> "BlockStorage":
        """
        Open storage backed by a JSON file, or in memory when no path is given.

        Args:
            path: Optional state file path

        Returns:
            BlockStorage instance
        """
        if path is None:
            return cls(TinyDB(storage=MemoryStorage))

        ensure_dir(path.parent)
        return cls(TinyDB(path))

    def get(self, key: int) -> str | None:
        """
        Get the value stored under a key.

        Args:
            key: Storage key

        Returns:
            Stored value, or None if not set
        """
        Entry = Query()
        result = self.entries.get(Entry.key == key)
        if result and isinstance(result, dict):
            return result.get("value")
        return None

    def set(self, key: int, value: str) -> None:
        """
        Store a value, replacing any previous value for the key.

        Args:
            key: Storage key
            value: Value to store
        """
        Entry = Query()
        self.entries.upsert({"key": key, "value": value}, Entry.key == key)

    def items(self) -> list[tuple[int, str]]:
        """Return all entries sorted by key."""
        return sorted((doc["key"], doc["value"]) for doc in self.entries.all())

    def as_dict(self) -> dict[int, str]:
        return dict(self.items())

    def get_height(self) -> int | None:
        """
        Get the last processed height.

        Returns:
            Last processed height, or None if nothing has been processed
        """
        return self._get_metadata("height")

    def set_height(self, height: int) -> None:
        """
        Record the last processed height.

        Args:
            height: Height to record
        """
        self._set_metadata("height", height)

    def get_initialized_height(self) -> int | None:
        """
        Get the last height whose initialize phase completed.

        Returns:
            Height, or None if no initialize phase has completed
        """
        return self._get_metadata("initialized")

    def set_initialized_height(self, height: int) -> None:
        """
        Record that the initialize phase of a height completed.

        Args:
            height: Height to record
        """
        self._set_metadata("initialized", height)

    def _get_metadata(self, field: str) -> int | None:
        result = self.metadata.get(doc_id=1)
        if result and isinstance(result, dict):
            return result.get(field)
        return None

    def _set_metadata(self, field: str, value: int) -> None:
        # Use update if doc exists, otherwise insert
        if self.metadata.get(doc_id=1):
            self.metadata.update({field: value}, doc_ids=[1])
        else:
            self.metadata.insert({field: value})

    def close(self) -> None:
        self.db.close()

    def __enter__(self) -> "BlockStorage":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
