#!/usr/bin/env python3
"""
Raw DSP-ADPCM to WAV Converter

Decodes headerless DSP-ADPCM frame data (as cut out of a container by one of
the extractors) into a 16-bit PCM WAV. The coefficient table and initial
history come from the container, so they are passed on the command line,
either as 16 comma separated values or as a file holding the 32-byte
big-endian table exactly as it appears on disc.

Usage:
    python -m gc_adpcm.dsp_to_wav --input SE01.raw --coefs 0x04ab,0xfc4e,... --samples 28000 --output se01.wav
    python -m gc_adpcm.dsp_to_wav --layout stereo --input L.raw --right R.raw \
        --coef-file L.coef --right-coef-file R.coef --frames 4000 --output bgm.wav
    python -m gc_adpcm.dsp_to_wav --layout interleaved --input BGM.raw \
        --coef-file L.coef --right-coef-file R.coef --frames 4000 --output bgm.wav
"""

import os
import sys
import argparse

from gc_adpcm.common.binary import parse_coefficient_list
from gc_adpcm.decoder import Decoder, UnexpectedEndOfStream
from gc_adpcm.dsp import Dsp, FRAME_SIZE
from gc_adpcm.pcm import to_array, write_wav

LAYOUT_CHOICES = ["mono", "stereo", "interleaved"]

def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Decode raw DSP-ADPCM frames to a WAV file.")
    parser.add_argument("--input", required=True, help="Raw frame data (left/mono channel, or both channels when interleaved)")
    parser.add_argument("--right", help="Raw frame data for the right channel (stereo layout only)")
    parser.add_argument("--layout", choices=LAYOUT_CHOICES, default="mono", help="Channel layout (default: mono)")
    parser.add_argument("--coefs", help="16 comma separated coefficients for the left/mono channel")
    parser.add_argument("--coef-file", help="32-byte big-endian coefficient table for the left/mono channel")
    parser.add_argument("--right-coefs", help="16 comma separated coefficients for the right channel")
    parser.add_argument("--right-coef-file", help="32-byte big-endian coefficient table for the right channel")
    parser.add_argument("--hist1", type=int, default=0, help="Initial history sample 1 (default: 0)")
    parser.add_argument("--hist2", type=int, default=0, help="Initial history sample 2 (default: 0)")
    parser.add_argument("--right-hist1", type=int, default=0, help="Initial right channel history sample 1 (default: 0)")
    parser.add_argument("--right-hist2", type=int, default=0, help="Initial right channel history sample 2 (default: 0)")
    parser.add_argument("--offset", type=lambda s: int(s, 0), default=0, help="Byte offset of the frame data in each input file")
    count = parser.add_mutually_exclusive_group()
    count.add_argument("--frames", type=int, help="Frames per channel (default: everything in the input)")
    count.add_argument("--samples", type=int, help="Samples per channel")
    parser.add_argument("--rate", type=int, default=32000, help="Sample rate (default: 32000)")
    parser.add_argument("--output", required=True, help="Output WAV path")
    return parser.parse_args(argv)

def load_state(coefs, coef_file, hist1, hist2, label):
    if coefs and coef_file:
        raise ValueError(f"Give either coefficients or a coefficient file for the {label} channel, not both")
    if coefs:
        return Dsp(parse_coefficient_list(coefs), hist1=hist1, hist2=hist2)
    if coef_file:
        with open(coef_file, 'rb') as f:
            data = f.read()
        return Dsp.from_header_bytes(data, hist1=hist1, hist2=hist2)
    raise ValueError(f"No coefficients given for the {label} channel")

def open_frames(path, offset):
    f = open(path, 'rb')
    f.seek(offset)
    return f

def available_frames(path, offset, per_channel_divisor=1):
    size = os.path.getsize(path) - offset
    return max(0, size) // FRAME_SIZE // per_channel_divisor

def frame_count(args):
    if args.samples is not None:
        return {"samples": args.samples}
    if args.frames is not None:
        return {"frames": args.frames}
    # Default to everything the input holds
    if args.layout == "stereo":
        frames = min(available_frames(args.input, args.offset), available_frames(args.right, args.offset))
    elif args.layout == "interleaved":
        frames = available_frames(args.input, args.offset, 2)
    else:
        frames = available_frames(args.input, args.offset)
    return {"frames": frames}

def build_decoder(args, readers):
    left = load_state(args.coefs, args.coef_file, args.hist1, args.hist2, "left")
    counts = frame_count(args)

    if args.layout == "mono":
        return Decoder.mono(readers[0], left, **counts)

    right = load_state(args.right_coefs, args.right_coef_file, args.right_hist1, args.right_hist2, "right")
    if args.layout == "stereo":
        return Decoder.stereo(readers[0], left, readers[1], right, **counts)
    return Decoder.interleaved_stereo(readers[0], left, right, **counts)

def main(argv=None):
    args = parse_args(argv)

    if not os.path.exists(args.input):
        print(f"Error: Input file not found: {args.input}", file=sys.stderr)
        return 1
    if args.layout == "stereo" and not args.right:
        print("Error: --right is required for the stereo layout", file=sys.stderr)
        return 1
    if args.right and not os.path.exists(args.right):
        print(f"Error: Input file not found: {args.right}", file=sys.stderr)
        return 1

    readers = [open_frames(args.input, args.offset)]
    if args.layout == "stereo":
        readers.append(open_frames(args.right, args.offset))

    try:
        decoder = build_decoder(args, readers)
        print(f"Decoding {args.input} ({args.layout}, {decoder.samples_per_channel} samples per channel)")
        samples = to_array(decoder)
        frames_written = write_wav(args.output, samples, args.rate, decoder.channels)
    except UnexpectedEndOfStream as e:
        print(f"Error: Input is truncated: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        for f in readers:
            f.close()

    print(f"Read {decoder.frames_read} frames, wrote {frames_written} samples per channel to {args.output}")
    return 0

if __name__ == "__main__":
    sys.exit(main())
