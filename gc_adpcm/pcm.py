import os
import wave
import numpy as np


def to_array(samples):
    """Collects decoded samples (a list or a Decoder) into an int16 numpy array."""
    if isinstance(samples, np.ndarray):
        return samples.astype('<i2')
    return np.fromiter(samples, dtype=np.int16)


def write_wav(path, samples, rate, channels):
    """Writes signed 16-bit PCM samples, channel-interleaved, to a WAV file."""
    if rate <= 0:
        raise ValueError(f"Sample rate must be positive: {rate}")
    if channels <= 0:
        raise ValueError(f"Channel count must be positive: {channels}")

    samples = to_array(samples)
    if len(samples) % channels:
        raise ValueError(f"{len(samples)} samples do not divide into {channels} channels")

    # WAV expects little endian signed 16-bit
    samples = samples.astype('<i2')

    out_dir = os.path.dirname(path)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)

    with wave.open(path, 'wb') as wav_file:
        wav_file.setnchannels(channels)
        wav_file.setsampwidth(2)
        wav_file.setframerate(rate)
        wav_file.writeframes(samples.tobytes())

    return len(samples) // channels
