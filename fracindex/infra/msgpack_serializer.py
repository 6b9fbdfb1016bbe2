import msgpack
from typing import Any

from fracindex.core.models.index import FractionalIndex
from fracindex.core.ports.serializer import Serializer


class MsgPackSerializer(Serializer):
    """
    MsgPack-based implementation of the Serializer interface.

    FractionalIndex values travel as a msgpack extension type whose
    payload is the canonical key bytes, so they survive a round trip
    as keys rather than as plain binary. Payloads are validated on
    unpack: a corrupt key raises FormatError.
    """
    EXT_FRACTIONAL_INDEX: int = 0x21

    def serialize(self, payload: Any) -> bytes:
        return msgpack.packb(payload, use_bin_type=True, default=self._default)

    def deserialize(self, data: bytes) -> Any:
        return msgpack.unpackb(data, raw=False, ext_hook=self._ext_hook)

    def _default(self, obj: Any) -> Any:
        if isinstance(obj, FractionalIndex):
            return msgpack.ExtType(self.EXT_FRACTIONAL_INDEX, obj.raw_bytes())
        raise TypeError(f"Cannot serialize {type(obj).__name__}")

    def _ext_hook(self, code: int, data: bytes) -> Any:
        if code == self.EXT_FRACTIONAL_INDEX:
            return FractionalIndex.decode_bytes(data)
        return msgpack.ExtType(code, data)
