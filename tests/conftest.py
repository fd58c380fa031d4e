import pytest

from gc_adpcm import Dsp

# Pair 0 is identity prediction (Q11 1.0), the rest unused
IDENTITY_COEFS = [2048, 0] + [0] * 14


def make_frame(nibbles, shift=0, index=0):
    """Packs 14 signed deltas into an 8-byte frame, high nibble first."""
    assert len(nibbles) == 14
    data = bytearray([((shift & 0xF) << 4) | (index & 0xF)])
    for hi, lo in zip(nibbles[0::2], nibbles[1::2]):
        data.append(((hi & 0xF) << 4) | (lo & 0xF))
    return bytes(data)


@pytest.fixture
def identity_state():
    return Dsp(IDENTITY_COEFS)


@pytest.fixture
def make_state():
    def _make(hist1=0, hist2=0, coefs=IDENTITY_COEFS):
        return Dsp(coefs, hist1=hist1, hist2=hist2)
    return _make
