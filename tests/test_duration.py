import io
import struct
import tempfile
import unittest
from pathlib import Path

from wav_filter.duration import compute_duration, is_wav_name, probe_wav, read_wav_header
from wav_filter.errors import DurationError, MalformedWavError, UnreadableWavError

from wavfixtures import riff_bytes, write_wav


class TestComputeDuration(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_one_second_at_44100(self) -> None:
        path = write_wav(self.tmp / "one.wav", 44100, 44100)
        self.assertEqual(compute_duration(path), 1000)

    def test_half_second(self) -> None:
        path = write_wav(self.tmp / "half.wav", 44100, 22050)
        self.assertEqual(compute_duration(path), 500)

    def test_zero_frames_is_zero_ms(self) -> None:
        path = write_wav(self.tmp / "empty.wav", 44100, 0)
        self.assertEqual(compute_duration(path), 0)

    def test_duration_is_floored(self) -> None:
        path = write_wav(self.tmp / "floor.wav", 44100, 22051)
        self.assertEqual(compute_duration(path), 500)
        path = write_wav(self.tmp / "tiny.wav", 44100, 1)
        self.assertEqual(compute_duration(path), 0)
        path = write_wav(self.tmp / "odd.wav", 48000, 14399)
        self.assertEqual(compute_duration(path), 299)

    def test_stereo_counts_frames_not_samples(self) -> None:
        path = write_wav(self.tmp / "stereo.wav", 44100, 44100, channels=2)
        header = probe_wav(path)
        self.assertEqual(header.channels, 2)
        self.assertEqual(header.block_align, 4)
        self.assertEqual(header.frame_count, 44100)
        self.assertEqual(header.duration_ms, 1000)

    def test_repeated_reads_agree(self) -> None:
        path = write_wav(self.tmp / "same.wav", 16000, 12345)
        self.assertEqual(compute_duration(path), compute_duration(path))
        self.assertEqual(compute_duration(path), 12345 * 1000 // 16000)

    def test_missing_file_is_unreadable(self) -> None:
        with self.assertRaises(UnreadableWavError) as ctx:
            compute_duration(self.tmp / "nonexistent.wav")
        self.assertEqual(ctx.exception.kind, "unreadable")

    def test_directory_is_unreadable(self) -> None:
        folder = self.tmp / "folder.wav"
        folder.mkdir()
        with self.assertRaises(UnreadableWavError):
            compute_duration(folder)

    def test_zero_byte_file_is_malformed(self) -> None:
        path = self.tmp / "zero.wav"
        path.write_bytes(b"")
        with self.assertRaises(MalformedWavError) as ctx:
            compute_duration(path)
        self.assertEqual(ctx.exception.kind, "malformed")

    def test_garbage_is_malformed(self) -> None:
        path = self.tmp / "garbage.wav"
        path.write_bytes(b"this is not audio at all, just some text" * 4)
        with self.assertRaises(MalformedWavError):
            compute_duration(path)

    def test_sample_rate_zero_is_malformed(self) -> None:
        path = self.tmp / "rate0.wav"
        path.write_bytes(riff_bytes(sample_rate=0, payload=b"\x00" * 16))
        with self.assertRaises(MalformedWavError) as ctx:
            compute_duration(path)
        self.assertIn("sample rate", ctx.exception.reason)

    def test_truncated_data_chunk_is_malformed(self) -> None:
        path = self.tmp / "truncated.wav"
        path.write_bytes(riff_bytes(payload=b"\x00" * 100, declared_data_size=8000))
        with self.assertRaises(MalformedWavError) as ctx:
            compute_duration(path)
        self.assertIn("truncated", ctx.exception.reason)

    def test_missing_chunks_are_malformed(self) -> None:
        no_fmt = self.tmp / "nofmt.wav"
        no_fmt.write_bytes(riff_bytes(payload=b"\x00" * 16, include_fmt=False))
        no_data = self.tmp / "nodata.wav"
        no_data.write_bytes(riff_bytes(include_data=False))
        for path in (no_fmt, no_data):
            with self.subTest(path=path.name):
                with self.assertRaises(MalformedWavError):
                    compute_duration(path)

    def test_errors_share_base_class(self) -> None:
        path = self.tmp / "zero.wav"
        path.write_bytes(b"")
        with self.assertRaises(DurationError):
            compute_duration(path)


class TestReadWavHeader(unittest.TestCase):
    def test_fmt_after_data(self) -> None:
        blob = riff_bytes(sample_rate=8000, payload=b"\x00" * 1600, data_first=True)
        header = read_wav_header(io.BytesIO(blob))
        self.assertEqual(header.sample_rate, 8000)
        self.assertEqual(header.frame_count, 800)
        self.assertEqual(header.duration_ms, 100)

    def test_unknown_chunks_are_skipped(self) -> None:
        junk = b"LIST" + struct.pack("<I", 3) + b"abc" + b"\x00"
        blob = riff_bytes(sample_rate=8000, payload=b"\x00" * 160, extra_chunks=junk)
        header = read_wav_header(io.BytesIO(blob))
        self.assertEqual(header.duration_ms, 10)

    def test_short_fmt_chunk(self) -> None:
        blob = b"RIFF" + struct.pack("<I", 16) + b"WAVE" + b"fmt " + struct.pack("<I", 4) + b"\x01\x00\x01\x00"
        with self.assertRaises(MalformedWavError):
            read_wav_header(io.BytesIO(blob))

    def test_rifx_rejected(self) -> None:
        blob = riff_bytes(payload=b"\x00" * 4)
        with self.assertRaises(MalformedWavError):
            read_wav_header(io.BytesIO(b"RIFX" + blob[4:]))

    def test_source_appears_in_message(self) -> None:
        with self.assertRaises(MalformedWavError) as ctx:
            read_wav_header(io.BytesIO(b""), source="clip.wav")
        self.assertIn("clip.wav", str(ctx.exception))


class TestIsWavName(unittest.TestCase):
    def test_case_insensitive(self) -> None:
        self.assertTrue(is_wav_name("a.wav"))
        self.assertTrue(is_wav_name("B.WAV"))
        self.assertTrue(is_wav_name("c.Wav"))

    def test_rejects_other_names(self) -> None:
        self.assertFalse(is_wav_name("d.txt"))
        self.assertFalse(is_wav_name("wav"))
        self.assertFalse(is_wav_name("e.wave"))
        self.assertFalse(is_wav_name(".wav"))
        self.assertFalse(is_wav_name(".WAV"))


if __name__ == "__main__":
    unittest.main()
