"""Tests for the WAV formatter."""

from __future__ import annotations

import io
import wave

import pytest

from shorts_studio.core.wav import WAV_HEADER_SIZE, parse_wav_header, pcm_to_wav


class TestPcmToWav:
    """Tests for header construction."""

    @pytest.mark.parametrize("size,rate", [(0, 24000), (7, 24000), (48000, 16000)])
    def test_header_round_trip(self, size: int, rate: int) -> None:
        pcm = bytes(i % 256 for i in range(size))
        wav = pcm_to_wav(pcm, rate)

        header = parse_wav_header(wav)
        assert len(wav) == WAV_HEADER_SIZE + size
        assert header.data_size == size
        assert header.sample_rate == rate
        assert header.chunk_size == 36 + size

    def test_exact_layout(self) -> None:
        wav = pcm_to_wav(b"\x01\x02\x03\x04", 24000)

        assert wav[0:4] == b"RIFF"
        assert wav[4:8] == (40).to_bytes(4, "little")
        assert wav[8:12] == b"WAVE"
        assert wav[12:16] == b"fmt "
        assert wav[16:20] == (16).to_bytes(4, "little")
        assert wav[20:22] == (1).to_bytes(2, "little")
        assert wav[22:24] == (1).to_bytes(2, "little")
        assert wav[24:28] == (24000).to_bytes(4, "little")
        assert wav[28:32] == (48000).to_bytes(4, "little")
        assert wav[32:34] == (2).to_bytes(2, "little")
        assert wav[34:36] == (16).to_bytes(2, "little")
        assert wav[36:40] == b"data"
        assert wav[40:44] == (4).to_bytes(4, "little")
        assert wav[44:] == b"\x01\x02\x03\x04"

    def test_readable_by_standard_library(self) -> None:
        pcm = b"\x00\x01" * 2400
        wav = pcm_to_wav(pcm, 24000)

        with wave.open(io.BytesIO(wav)) as reader:
            assert reader.getnchannels() == 1
            assert reader.getsampwidth() == 2
            assert reader.getframerate() == 24000
            assert reader.readframes(reader.getnframes()) == pcm


class TestParseWavHeader:
    """Tests for header parsing."""

    def test_too_short(self) -> None:
        with pytest.raises(ValueError, match="too short"):
            parse_wav_header(b"RIFF")

    def test_wrong_markers(self) -> None:
        with pytest.raises(ValueError, match="Not a canonical"):
            parse_wav_header(b"X" * 44)
