"""Demo hotfix: Three."""

from ..migrations import HotfixMigration
from .payload import decode, encode


class Three(HotfixMigration):
    """Overwrites the counter in the payload with 12345."""

    name = "Three"

    def description(self) -> str:
        return "Some cool hotfix"

    def transform(self, data: bytes) -> bytes | None:
        counter = decode(data)
        if counter is None:
            return None
        counter.value = 12345
        return encode(counter)
