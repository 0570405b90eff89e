"""Payload carried through hotfix migrations in the demo."""

from pydantic import BaseModel, ConfigDict, ValidationError


class Counter(BaseModel):
    """A single counter value, serialized as JSON bytes."""

    model_config = ConfigDict(extra="forbid", strict=True)

    value: int = 0


def encode(counter: Counter) -> bytes:
    return counter.model_dump_json().encode("utf-8")


def decode(data: bytes) -> Counter | None:
    """
    Decode a payload.

    Args:
        data: Encoded payload

    Returns:
        Decoded counter, or None if the payload is not a valid counter
    """
    try:
        return Counter.model_validate_json(data)
    except ValidationError:
        return None
