import pytest

from gc_adpcm.common.binary import parse_coefficient_list, read_s16_be


def test_read_s16_be():
    assert read_s16_be(b'\x00\x01\xff\xfe', 2) == -2
    assert read_s16_be(b'\x08\x00') == 2048


def test_parse_coefficient_list():
    assert parse_coefficient_list("2048, -1024,0x0400,0xFC00,") == [2048, -1024, 1024, -1024]


def test_parse_coefficient_list_rejects_wide_hex():
    with pytest.raises(ValueError):
        parse_coefficient_list("0x10000")
