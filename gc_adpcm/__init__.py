"""Decoder for the DSP-ADPCM format used on GameCube, Wii and Wii U."""

from .dsp import Dsp, FRAME_SIZE, SAMPLES_PER_FRAME
from .decoder import Decoder, UnexpectedEndOfStream, MONO, STEREO, INTERLEAVED_STEREO

__version__ = "0.2.0"
