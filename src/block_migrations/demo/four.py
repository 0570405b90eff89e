"""Demo hotfix: Four."""

from ..migrations import HotfixMigration
from .payload import decode, encode


class Four(HotfixMigration):
    name = "Four"

    def description(self) -> str:
        return "Wow!"

    def transform(self, data: bytes) -> bytes | None:
        counter = decode(data)
        if counter is None:
            return None
        # Wider than 32 bits on purpose
        counter.value = 10_000_000_000
        return encode(counter)
