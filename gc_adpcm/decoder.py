"""
Stream-level DSP-ADPCM decoding.

Decoder wraps one or two Dsp states and one or two readers (anything with a
binary read(n)) and yields PCM samples one at a time:

  mono                one reader, one channel, samples in stream order
  stereo              two readers, one per channel, output L0 R0 L1 R1 ...
  interleaved_stereo  one reader holding L frame, R frame, L frame, ...
                      output L0 R0 L1 R1 ...

The readers are borrowed. Decoder never closes them and never reads further
ahead than the frame it is about to emit from.
"""

from .dsp import FRAME_SIZE, SAMPLES_PER_FRAME

MONO = "mono"
STEREO = "stereo"
INTERLEAVED_STEREO = "interleaved_stereo"

LAYOUTS = (MONO, STEREO, INTERLEAVED_STEREO)


class UnexpectedEndOfStream(EOFError):
    """The reader ran out before a full frame could be read."""

    def __init__(self, received, channel=0):
        self.received = received
        self.channel = channel
        super().__init__(
            f"Unexpected end of stream on channel {channel}: "
            f"got {received} of {FRAME_SIZE} frame bytes"
        )


def read_frame(reader, channel=0):
    """
    Reads exactly one frame. Short reads are retried; an empty read means EOF.
    """
    frame = b''
    while len(frame) < FRAME_SIZE:
        chunk = reader.read(FRAME_SIZE - len(frame))
        if not chunk:
            raise UnexpectedEndOfStream(len(frame), channel)
        frame += chunk
    return frame


def _samples_per_channel(frames, samples):
    if (frames is None) == (samples is None):
        raise ValueError("Pass exactly one of frames= or samples=")
    if frames is not None:
        if frames < 0:
            raise ValueError(f"Frame count must not be negative: {frames}")
        return frames * SAMPLES_PER_FRAME
    if samples < 0:
        raise ValueError(f"Sample count must not be negative: {samples}")
    return samples


class Decoder:
    """
    Iterator of decoded PCM samples for one of the three channel layouts.

    Use the mono(), stereo() and interleaved_stereo() constructors. Iteration
    ends once every channel has produced its requested sample count. A read
    error is raised from next() as-is, a truncated stream raises
    UnexpectedEndOfStream; either way the decoder is finished afterwards and
    further next() calls raise StopIteration.
    """

    def __init__(self, layout, readers, states, samples_per_channel):
        if layout not in LAYOUTS:
            raise ValueError(f"Unknown channel layout: {layout}")
        self.layout = layout
        self.readers = readers
        self.states = states
        self.samples_per_channel = samples_per_channel

        self.frames_read = 0
        self.samples_emitted = 0
        self._emitted = [0] * len(states)
        self._pending = [[] for _ in states]
        self._pos = [0] * len(states)
        self._channel = 0
        self._done = False

    @classmethod
    def mono(cls, reader, state, frames=None, samples=None):
        """Decode a mono stream. frames/samples count the whole stream."""
        return cls(MONO, [reader], [state], _samples_per_channel(frames, samples))

    @classmethod
    def stereo(cls, left_reader, left_state, right_reader, right_state, frames=None, samples=None):
        """
        Decode a stereo stream where each channel has its own reader.
        frames/samples count one channel.
        """
        return cls(STEREO, [left_reader, right_reader], [left_state, right_state],
                   _samples_per_channel(frames, samples))

    @classmethod
    def interleaved_stereo(cls, reader, left_state, right_state, frames=None, samples=None):
        """
        Decode a stereo stream interleaved per frame in a single reader.
        frames/samples count one channel, so 2 * frames frames are read in total.
        """
        return cls(INTERLEAVED_STEREO, [reader], [left_state, right_state],
                   _samples_per_channel(frames, samples))

    @property
    def channels(self):
        return len(self.states)

    @property
    def total_samples(self):
        return self.samples_per_channel * self.channels

    @property
    def remaining(self):
        if self._done:
            return 0
        return self.total_samples - self.samples_emitted

    def _reader_for(self, channel):
        # Interleaved stereo pulls both channels from the one reader
        if len(self.readers) == 1:
            return self.readers[0]
        return self.readers[channel]

    def _refill(self, channel):
        frame = read_frame(self._reader_for(channel), channel)
        self.frames_read += 1
        self._pending[channel] = self.states[channel].decode_frame(frame)
        self._pos[channel] = 0

    def __iter__(self):
        return self

    def __next__(self):
        if self._done:
            raise StopIteration

        channel = self._channel
        if self._emitted[channel] >= self.samples_per_channel:
            # Channels advance in lockstep, so the first exhausted channel ends it
            self._done = True
            raise StopIteration

        if self._pos[channel] >= len(self._pending[channel]):
            try:
                self._refill(channel)
            except Exception:
                self._done = True
                raise

        sample = self._pending[channel][self._pos[channel]]
        self._pos[channel] += 1
        self._emitted[channel] += 1
        self.samples_emitted += 1
        self._channel = (channel + 1) % self.channels
        return sample

    def __repr__(self):
        return (f"Decoder(layout={self.layout!r}, samples_per_channel={self.samples_per_channel}, "
                f"emitted={self.samples_emitted}, frames_read={self.frames_read})")
