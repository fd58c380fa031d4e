"""
Nintendo DSP-ADPCM (GC-ADPCM) frame decoder.

Format reference:
  - Each frame is 8 bytes and decodes to 14 signed 16-bit samples.
  - Byte 0 is the frame header:
        high nibble = range shift (0-12), applied to every delta in the frame
        low nibble  = coefficient pair index (only 8 pairs exist, masked & 7)
  - Bytes 1-7 hold 14 signed 4-bit deltas, high nibble first.
  - Prediction uses two history samples and a Q11 coefficient pair
    (2048 == 1.0), rounded at the 11-bit shift the same way the hardware
    reference decoder does.

This module is the low-level API. It has no notion of channels or streams;
callers that do their own container parsing feed frames straight into
Dsp.decode_frame(). See decoder.py for the stream-level wrapper.
"""

import numbers

from .common.binary import read_s16_be

# The size of one frame in bytes
FRAME_SIZE = 8
# The amount of samples in a single frame
SAMPLES_PER_FRAME = 14

NUM_COEFFICIENTS = 16

# 4-bit two's complement
NIBBLE_TO_S8 = [0, 1, 2, 3, 4, 5, 6, 7, -8, -7, -6, -5, -4, -3, -2, -1]

S16_MIN = -32768
S16_MAX = 32767


def get_high_nibble(byte):
    return NIBBLE_TO_S8[(byte >> 4) & 0xF]


def get_low_nibble(byte):
    return NIBBLE_TO_S8[byte & 0xF]


def clamp(val):
    """Saturate to the signed 16-bit range."""
    if val > S16_MAX: return S16_MAX
    if val < S16_MIN: return S16_MIN
    return val


def _check_s16(val, what):
    if not isinstance(val, numbers.Integral) or isinstance(val, bool):
        raise ValueError(f"{what} must be an integer, got {val!r}")
    if val < S16_MIN or val > S16_MAX:
        raise ValueError(f"{what} out of signed 16-bit range: {val}")
    return int(val)


def _flatten_coefficients(coefficients):
    coefs = list(coefficients)
    # 8 (coef1, coef2) pairs
    if len(coefs) == 8 and all(isinstance(c, (tuple, list)) for c in coefs):
        flat = []
        for pair in coefs:
            if len(pair) != 2:
                raise ValueError(f"Coefficient pair must have 2 values, got {len(pair)}")
            flat.extend(pair)
        coefs = flat

    if len(coefs) != NUM_COEFFICIENTS:
        raise ValueError(f"Expected {NUM_COEFFICIENTS} coefficients (8 pairs), got {len(coefs)}")

    return tuple(_check_s16(c, f"Coefficient {i}") for i, c in enumerate(coefs))


class Dsp:
    """
    Decoder state of a single channel.

    Holds the channel's coefficient table (fixed for its lifetime) and the two
    most recent output samples. Frames must be fed strictly in stream order:
    every decode_frame() call continues from the history the previous call
    left behind.
    """

    def __init__(self, coefficients, hist1=0, hist2=0):
        self.coefficients = _flatten_coefficients(coefficients)
        self.hist1 = _check_s16(hist1, "hist1")
        self.hist2 = _check_s16(hist2, "hist2")

    @classmethod
    def from_header_bytes(cls, data, offset=0, hist1=0, hist2=0):
        """
        Builds a state from a raw coefficient table as stored on disc:
        16 big-endian s16 values (32 bytes) starting at offset.
        """
        end = offset + NUM_COEFFICIENTS * 2
        if offset < 0 or end > len(data):
            raise ValueError(f"Coefficient table needs 32 bytes at {hex(offset)}, buffer is {len(data)} bytes")
        coefs = [read_s16_be(data, offset + i * 2) for i in range(NUM_COEFFICIENTS)]
        return cls(coefs, hist1=hist1, hist2=hist2)

    @property
    def history(self):
        return (self.hist1, self.hist2)

    def coefficient_pair(self, index):
        index &= 7
        return self.coefficients[index * 2], self.coefficients[index * 2 + 1]

    def decode_frame(self, frame):
        """
        Decodes one 8-byte frame into 14 PCM samples and advances the history.
        """
        if len(frame) != FRAME_SIZE:
            raise ValueError(f"A frame is {FRAME_SIZE} bytes, got {len(frame)}")

        header = frame[0]
        shift = (header >> 4) & 0xF
        coef1, coef2 = self.coefficient_pair(header & 0xF)

        hist1 = self.hist1
        hist2 = self.hist2
        out = []

        # 7 data bytes, high nibble first
        for byte in frame[1:]:
            for nibble in (get_high_nibble(byte), get_low_nibble(byte)):
                predicted = (coef1 * hist1 + coef2 * hist2 + 1024) >> 11
                sample = clamp(predicted + (nibble << shift))
                out.append(sample)
                hist2 = hist1
                hist1 = sample

        self.hist1 = hist1
        self.hist2 = hist2
        return out

    def decode(self, data):
        """
        Decodes a buffer of consecutive frames for this channel.
        """
        if len(data) % FRAME_SIZE:
            raise ValueError(f"Data length {len(data)} is not a multiple of the {FRAME_SIZE}-byte frame size")

        view = memoryview(data)
        samples = []
        for pos in range(0, len(data), FRAME_SIZE):
            samples.extend(self.decode_frame(view[pos:pos + FRAME_SIZE]))
        return samples

    def __repr__(self):
        return f"Dsp(hist1={self.hist1}, hist2={self.hist2}, coefficients={list(self.coefficients)})"
