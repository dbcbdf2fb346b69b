import numpy as np
import pytest

from pixeldecode.pixels import (
    DecodeError,
    DecodedPlane,
    OutputRepresentation,
    PixelTypeDescriptor,
    UnsupportedWidth,
    decode_raw,
    decode_raw_bytes,
)


def _encode(values, kind: str, bpp: int, little_endian: bool) -> bytes:
    order = "<" if little_endian else ">"
    return np.array(values, dtype=f"{order}{kind}{bpp}").tobytes()


@pytest.mark.parametrize("bpp", [1, 2, 4, 8])
@pytest.mark.parametrize("signed", [True, False])
def test_decode_raw_length_matches_sample_count(bpp, signed):
    if bpp == 8 and not signed:
        pytest.skip("unsigned 64-bit has no representation")
    buf = bytes(range(bpp * 5))
    plane = decode_raw(buf, PixelTypeDescriptor(bytes_per_pixel=bpp, signed=signed))
    assert len(plane) == 5
    assert plane.values.shape == (5,)


@pytest.mark.parametrize("little_endian", [True, False])
@pytest.mark.parametrize(
    "kind,bpp,value",
    [
        ("i", 1, -128),
        ("i", 1, 127),
        ("u", 1, 255),
        ("i", 2, -32768),
        ("i", 2, 12345),
        ("u", 2, 65535),
        ("i", 4, -2147483648),
        ("i", 4, 2147483647),
        ("u", 4, 4294967295),
        ("i", 8, -(2**63)),
        ("i", 8, 2**63 - 1),
    ],
)
def test_decode_raw_round_trips_integer_values(kind, bpp, value, little_endian):
    buf = _encode([value], kind, bpp, little_endian)
    plane = decode_raw_bytes(
        buf,
        bytes_per_pixel=bpp,
        signed=kind == "i",
        floating_point=False,
        little_endian=little_endian,
    )
    assert plane.values.tolist() == [value]


def test_signed_32_bit_min_is_returned_as_double():
    buf = _encode([-2147483648, 0, 7], "i", 4, True)
    plane = decode_raw_bytes(
        buf, bytes_per_pixel=4, signed=True, floating_point=False, little_endian=True
    )
    assert plane.representation is OutputRepresentation.WIDENED_INT32_AS_DOUBLE
    assert plane.dtype == np.float64
    assert plane.dtype != np.int32
    assert plane.values[0] == -2147483648.0


def test_unsigned_32_bit_max_decodes_to_int64():
    buf = _encode([4294967295], "u", 4, False)
    plane = decode_raw_bytes(
        buf, bytes_per_pixel=4, signed=False, floating_point=False, little_endian=False
    )
    assert plane.representation is OutputRepresentation.WIDENED_INT64
    assert plane.dtype == np.int64
    assert int(plane.values[0]) == 4294967295


def test_int8_bytes_pass_through():
    plane = decode_raw(b"\xff\x01\x80", PixelTypeDescriptor(bytes_per_pixel=1, signed=True))
    assert plane.representation is OutputRepresentation.INT8_BYTES
    assert plane.values.tolist() == [-1, 1, -128]


def test_uint8_widens_to_short():
    plane = decode_raw(b"\xff\x00", PixelTypeDescriptor(bytes_per_pixel=1, signed=False))
    assert plane.representation is OutputRepresentation.WIDENED_SHORT
    assert plane.dtype == np.int16
    assert plane.values.tolist() == [255, 0]


@pytest.mark.parametrize("little_endian", [True, False])
def test_decode_floats(little_endian):
    buf32 = _encode([1.5, -2.25, np.inf], "f", 4, little_endian)
    plane32 = decode_raw_bytes(
        buf32, bytes_per_pixel=4, signed=True, floating_point=True, little_endian=little_endian
    )
    assert plane32.representation is OutputRepresentation.FLOAT32
    assert plane32.values.tolist() == [1.5, -2.25, np.inf]

    buf64 = _encode([0.1, -1e300], "f", 8, little_endian)
    plane64 = decode_raw_bytes(
        buf64, bytes_per_pixel=8, signed=True, floating_point=True, little_endian=little_endian
    )
    assert plane64.representation is OutputRepresentation.FLOAT64
    assert plane64.values.tolist() == [0.1, -1e300]


def test_decode_raw_rejects_partial_samples():
    with pytest.raises(DecodeError):
        decode_raw(bytes(7), PixelTypeDescriptor(bytes_per_pixel=2))


def test_decode_error_is_a_value_error():
    with pytest.raises(ValueError):
        decode_raw(bytes(3), PixelTypeDescriptor(bytes_per_pixel=4, floating_point=True))


def test_decode_raw_rejects_unsupported_combinations():
    with pytest.raises(UnsupportedWidth):
        decode_raw(bytes(4), PixelTypeDescriptor(bytes_per_pixel=2, floating_point=True))
    with pytest.raises(UnsupportedWidth):
        decode_raw(bytes(8), PixelTypeDescriptor(bytes_per_pixel=8, signed=False))


def test_decode_raw_empty_buffer():
    plane = decode_raw(b"", PixelTypeDescriptor(bytes_per_pixel=4, signed=True))
    assert len(plane) == 0
    assert plane.dtype == np.float64


@pytest.mark.parametrize(
    "buffer",
    [
        bytearray(b"\x01\x00\x02\x00"),
        memoryview(b"\x01\x00\x02\x00"),
        np.array([1, 0, 2, 0], dtype=np.uint8),
    ],
)
def test_decode_raw_accepts_bytes_like(buffer):
    plane = decode_raw(buffer, PixelTypeDescriptor(bytes_per_pixel=2, little_endian=True))
    assert plane.values.tolist() == [1, 2]


def test_decode_raw_rejects_str_and_wide_arrays():
    with pytest.raises(TypeError):
        decode_raw("abcd", PixelTypeDescriptor(bytes_per_pixel=1))
    with pytest.raises(TypeError):
        decode_raw(np.zeros(2, dtype=np.uint16), PixelTypeDescriptor(bytes_per_pixel=2))


def test_decoded_values_are_native_and_writable():
    buf = _encode([1, 2], "i", 2, False)
    plane = decode_raw(buf, PixelTypeDescriptor(bytes_per_pixel=2, little_endian=False))
    assert plane.values.dtype.isnative
    plane.values[0] = 9
    assert plane.values.tolist() == [9, 2]


def test_decoded_plane_reshape():
    buf = _encode(list(range(6)), "i", 2, True)
    plane = decode_raw(buf, PixelTypeDescriptor(bytes_per_pixel=2))
    assert plane.reshape(2, 3).tolist() == [[0, 1, 2], [3, 4, 5]]
    with pytest.raises(ValueError):
        plane.reshape(4, 2)


def test_decoded_plane_checks_dtype():
    with pytest.raises(ValueError):
        DecodedPlane(OutputRepresentation.WIDENED_SHORT, np.zeros(3, dtype=np.int32))
    with pytest.raises(ValueError):
        DecodedPlane(OutputRepresentation.FLOAT64, np.zeros((2, 2), dtype=np.float64))
