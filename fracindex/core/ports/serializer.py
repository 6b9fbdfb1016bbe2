from typing import Any, Protocol


class Serializer(Protocol):
    """
    Binary codec for payloads that may hold FractionalIndex values,
    at any depth inside lists and dicts.

    Keys come back as FractionalIndex instances; a corrupt key raises
    FormatError instead of producing an invalid value.
    """

    def serialize(self, payload: Any) -> bytes:
        ...

    def deserialize(self, data: bytes) -> Any:
        ...
