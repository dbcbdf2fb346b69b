import numpy as np
import pytest

from pixeldecode.pixels import (
    OutputRepresentation,
    PixelTypeDescriptor,
    UnsupportedWidth,
    select_representation,
)
from pixeldecode.pixels.promotion import REPRESENTATION_DTYPES


@pytest.mark.parametrize(
    "bpp,signed,fp,expected",
    [
        (1, True, False, OutputRepresentation.INT8_BYTES),
        (1, False, False, OutputRepresentation.WIDENED_SHORT),
        (2, True, False, OutputRepresentation.WIDENED_SHORT),
        (2, False, False, OutputRepresentation.WIDENED_INT32_AS_DOUBLE),
        (4, True, False, OutputRepresentation.WIDENED_INT32_AS_DOUBLE),
        (4, False, False, OutputRepresentation.WIDENED_INT64),
        (8, True, False, OutputRepresentation.WIDENED_INT64),
        (4, True, True, OutputRepresentation.FLOAT32),
        (8, True, True, OutputRepresentation.FLOAT64),
    ],
)
def test_select_representation_table(bpp, signed, fp, expected):
    descriptor = PixelTypeDescriptor(bytes_per_pixel=bpp, signed=signed, floating_point=fp)
    assert select_representation(descriptor) is expected


@pytest.mark.parametrize("little_endian", [True, False])
def test_select_representation_ignores_byte_order_and_bit_depth(little_endian):
    descriptor = PixelTypeDescriptor(
        bytes_per_pixel=2, signed=False, true_bit_depth=12, little_endian=little_endian
    )
    assert select_representation(descriptor) is OutputRepresentation.WIDENED_INT32_AS_DOUBLE


@pytest.mark.parametrize("bpp", [1, 2])
def test_narrow_floats_are_unsupported(bpp):
    descriptor = PixelTypeDescriptor(bytes_per_pixel=bpp, floating_point=True)
    with pytest.raises(UnsupportedWidth):
        select_representation(descriptor)


def test_unsigned_64_bit_is_unsupported():
    descriptor = PixelTypeDescriptor(bytes_per_pixel=8, signed=False)
    with pytest.raises(UnsupportedWidth):
        select_representation(descriptor)


def test_no_representation_is_native_int32():
    assert np.dtype(np.int32) not in REPRESENTATION_DTYPES.values()
    assert set(REPRESENTATION_DTYPES) == set(OutputRepresentation)


def test_representation_dtype_property():
    assert OutputRepresentation.WIDENED_SHORT.dtype == np.dtype(np.int16)
    assert OutputRepresentation.WIDENED_INT32_AS_DOUBLE.dtype == np.dtype(np.float64)
    assert OutputRepresentation.WIDENED_INT64.dtype == np.dtype(np.int64)
