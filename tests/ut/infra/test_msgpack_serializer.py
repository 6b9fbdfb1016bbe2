import msgpack
import pytest

from fracindex.core.errors import FormatError
from fracindex.core.generator.generator import FractionalIndexGenerator
from fracindex.core.models.index import FractionalIndex
from fracindex.infra.msgpack_serializer import MsgPackSerializer


@pytest.mark.ut
def test_round_trip_plain_values(serializer):
    message = {"type": "move", "data": {"id": 3, "tags": ["a", "b"], "blob": b"\x00\x01"}}
    assert serializer.deserialize(serializer.serialize(message)) == message


@pytest.mark.ut
def test_keys_travel_as_keys(serializer, sequential_keys):
    message = {"row": 7, "position": sequential_keys[5], "history": sequential_keys[:3]}

    decoded = serializer.deserialize(serializer.serialize(message))

    assert decoded["row"] == 7
    assert decoded["position"] == sequential_keys[5]
    assert isinstance(decoded["position"], FractionalIndex)
    assert decoded["history"] == sequential_keys[:3]


@pytest.mark.ut
def test_key_payload_is_the_canonical_encoding(serializer):
    key = FractionalIndexGenerator.after(FractionalIndex.default())

    packed = serializer.serialize(key)
    ext = msgpack.unpackb(packed)

    assert isinstance(ext, msgpack.ExtType)
    assert ext.code == MsgPackSerializer.EXT_FRACTIONAL_INDEX
    assert ext.data == b"\x81\x80"


@pytest.mark.ut
def test_corrupt_key_payload_is_rejected(serializer):
    packed = msgpack.packb(msgpack.ExtType(MsgPackSerializer.EXT_FRACTIONAL_INDEX, b"\x00\x80"))

    with pytest.raises(FormatError):
        serializer.deserialize(packed)


@pytest.mark.ut
def test_unknown_extension_types_are_kept(serializer):
    packed = msgpack.packb(msgpack.ExtType(5, b"xyz"))
    assert serializer.deserialize(packed) == msgpack.ExtType(5, b"xyz")


@pytest.mark.ut
def test_unsupported_objects_fail(serializer):
    with pytest.raises(TypeError):
        serializer.serialize({"value": object()})
