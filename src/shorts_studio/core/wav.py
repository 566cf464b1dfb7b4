"""
WAV Formatter — wraps raw PCM samples in a standard RIFF/WAVE container.

Pure and deterministic: the header is always 44 bytes and the samples
follow verbatim, so any standard player accepts the result.

Usage:
    wav_bytes = pcm_to_wav(pcm, sample_rate=24000)
    header = parse_wav_header(wav_bytes)
"""

from __future__ import annotations

import struct
from dataclasses import dataclass

WAV_HEADER_SIZE = 44
PCM_FORMAT = 1
DEFAULT_CHANNELS = 1
DEFAULT_BITS_PER_SAMPLE = 16

_HEADER = struct.Struct("<4sI4s4sIHHIIHH4sI")


@dataclass(frozen=True)
class WavHeader:
    """Decoded fields of a 44-byte WAV header."""

    chunk_size: int
    audio_format: int
    channels: int
    sample_rate: int
    byte_rate: int
    block_align: int
    bits_per_sample: int
    data_size: int


def pcm_to_wav(
    pcm: bytes,
    sample_rate: int,
    channels: int = DEFAULT_CHANNELS,
    bits_per_sample: int = DEFAULT_BITS_PER_SAMPLE,
) -> bytes:
    """Prefix little-endian PCM bytes with a WAV header.

    Args:
        pcm: Raw sample bytes.
        sample_rate: Samples per second (24000 for synthesized speech).
        channels: Channel count.
        bits_per_sample: Bit depth.

    Returns:
        Header + samples.
    """
    byte_rate = sample_rate * channels * bits_per_sample // 8
    block_align = channels * bits_per_sample // 8
    data_size = len(pcm)

    header = _HEADER.pack(
        b"RIFF",
        36 + data_size,
        b"WAVE",
        b"fmt ",
        16,
        PCM_FORMAT,
        channels,
        sample_rate,
        byte_rate,
        block_align,
        bits_per_sample,
        b"data",
        data_size,
    )
    return header + bytes(pcm)


def parse_wav_header(data: bytes) -> WavHeader:
    """Decode the fixed 44-byte header produced by ``pcm_to_wav``.

    Raises:
        ValueError: If the buffer is too short or the markers are wrong.
    """
    if len(data) < WAV_HEADER_SIZE:
        raise ValueError(f"WAV buffer too short ({len(data)} bytes)")

    (
        riff,
        chunk_size,
        wave,
        fmt,
        _subchunk_size,
        audio_format,
        channels,
        sample_rate,
        byte_rate,
        block_align,
        bits_per_sample,
        data_marker,
        data_size,
    ) = _HEADER.unpack_from(data)

    if (riff, wave, fmt, data_marker) != (b"RIFF", b"WAVE", b"fmt ", b"data"):
        raise ValueError("Not a canonical PCM WAV header")

    return WavHeader(
        chunk_size=chunk_size,
        audio_format=audio_format,
        channels=channels,
        sample_rate=sample_rate,
        byte_rate=byte_rate,
        block_align=block_align,
        bits_per_sample=bits_per_sample,
        data_size=data_size,
    )
