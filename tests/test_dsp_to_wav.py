import struct
import wave

from gc_adpcm.dsp_to_wav import main

from conftest import IDENTITY_COEFS, make_frame

UP = make_frame([1] * 14)
DOWN = make_frame([-1] * 14)
COEF_ARG = ",".join(str(c) for c in IDENTITY_COEFS)


def read_wav(path):
    with wave.open(str(path), 'rb') as wav_file:
        nframes = wav_file.getnframes()
        values = struct.unpack(f"<{nframes * wav_file.getnchannels()}h", wav_file.readframes(nframes))
        return wav_file.getnchannels(), wav_file.getframerate(), list(values)


def test_mono_whole_file(tmp_path):
    raw = tmp_path / "se.raw"
    raw.write_bytes(UP * 2)
    out = tmp_path / "se.wav"

    assert main(["--input", str(raw), "--coefs", COEF_ARG, "--output", str(out)]) == 0
    channels, rate, samples = read_wav(out)
    assert channels == 1
    assert rate == 32000
    assert samples == list(range(1, 29))


def test_mono_offset_and_sample_count(tmp_path):
    raw = tmp_path / "se.raw"
    raw.write_bytes(b'HDR!' + UP * 2)
    out = tmp_path / "se.wav"

    assert main(["--input", str(raw), "--coefs", COEF_ARG, "--offset", "0x4",
                 "--samples", "16", "--rate", "22050", "--output", str(out)]) == 0
    channels, rate, samples = read_wav(out)
    assert rate == 22050
    assert samples == list(range(1, 17))


def test_interleaved_with_coef_files(tmp_path):
    raw = tmp_path / "bgm.raw"
    raw.write_bytes((UP + DOWN) * 2)
    coef_file = tmp_path / "ch.coef"
    coef_file.write_bytes(struct.pack('>16h', *IDENTITY_COEFS))
    out = tmp_path / "bgm.wav"

    assert main(["--layout", "interleaved", "--input", str(raw), "--coef-file", str(coef_file),
                 "--right-coef-file", str(coef_file), "--output", str(out)]) == 0
    channels, _, samples = read_wav(out)
    assert channels == 2
    assert samples[:4] == [1, -1, 2, -2]
    assert len(samples) == 56


def test_discrete_stereo(tmp_path):
    left = tmp_path / "l.raw"
    right = tmp_path / "r.raw"
    left.write_bytes(UP)
    right.write_bytes(DOWN)
    out = tmp_path / "st.wav"

    assert main(["--layout", "stereo", "--input", str(left), "--right", str(right),
                 "--coefs", COEF_ARG, "--right-coefs", COEF_ARG, "--frames", "1", "--output", str(out)]) == 0
    channels, _, samples = read_wav(out)
    assert channels == 2
    assert samples[0::2] == list(range(1, 15))
    assert samples[1::2] == [-s for s in range(1, 15)]


def test_truncated_input_fails(tmp_path, capsys):
    raw = tmp_path / "se.raw"
    raw.write_bytes(UP)
    out = tmp_path / "se.wav"

    assert main(["--input", str(raw), "--coefs", COEF_ARG, "--frames", "2", "--output", str(out)]) == 1
    assert "truncated" in capsys.readouterr().err
    assert not out.exists()


def test_stereo_needs_right_input(tmp_path):
    raw = tmp_path / "l.raw"
    raw.write_bytes(UP)
    assert main(["--layout", "stereo", "--input", str(raw), "--coefs", COEF_ARG,
                 "--right-coefs", COEF_ARG, "--output", str(tmp_path / "x.wav")]) == 1


def test_missing_coefficients(tmp_path, capsys):
    raw = tmp_path / "se.raw"
    raw.write_bytes(UP)
    assert main(["--input", str(raw), "--output", str(tmp_path / "x.wav")]) == 1
    assert "No coefficients" in capsys.readouterr().err


def test_missing_input(tmp_path):
    assert main(["--input", str(tmp_path / "nope.raw"), "--coefs", COEF_ARG,
                 "--output", str(tmp_path / "x.wav")]) == 1
