"""Convert challenge audio into the PCM layout Whisper expects."""

import tempfile
from pathlib import Path
from typing import Optional

import numpy as np
from pydub import AudioSegment
from pydub.exceptions import CouldntDecodeError

from errors import TranscodeError

TARGET_SAMPLE_RATE = 16000


def sniff_format(data: bytes) -> Optional[str]:
    """Guess the container from magic bytes. None lets ffmpeg probe it."""
    if data[:4] == b"RIFF" and data[8:12] == b"WAVE":
        return "wav"
    if data[:3] == b"ID3" or (len(data) > 1 and data[0] == 0xFF and data[1] & 0xE0 == 0xE0):
        return "mp3"
    if data[:4] == b"OggS":
        return "ogg"
    return None


class AudioTranscoder:
    def __init__(self, sample_rate: int = TARGET_SAMPLE_RATE, scratch_dir: str | None = None):
        self.sample_rate = sample_rate
        self.scratch_dir = scratch_dir

    def transcode(self, data: bytes) -> np.ndarray:
        """
        Decode a complete audio buffer to mono float32 samples at self.sample_rate.
        Multi-channel input keeps only its first channel.
        Raises TranscodeError on undecodable input or a failed ffmpeg run.
        """
        if not data:
            raise TranscodeError("empty audio buffer")

        fmt = sniff_format(data)
        with tempfile.TemporaryDirectory(prefix="recaptcha-audio-", dir=self.scratch_dir) as tmp:
            source = Path(tmp) / f"challenge.{fmt or 'bin'}"
            source.write_bytes(data)
            try:
                segment = AudioSegment.from_file(str(source), format=fmt)
                if segment.channels > 1:
                    segment = segment.split_to_mono()[0]
                if segment.frame_rate != self.sample_rate:
                    segment = segment.set_frame_rate(self.sample_rate)
            except CouldntDecodeError as e:
                raise TranscodeError(f"could not decode audio ({fmt or 'unknown format'}): {e}") from e
            except Exception as e:
                # ffmpeg missing or killed, or a header pydub could not parse
                raise TranscodeError(f"audio conversion failed: {e}") from e

        samples = np.array(segment.get_array_of_samples(), dtype=np.float32)
        if samples.size == 0:
            raise TranscodeError("decoded audio contains no samples")

        # integer PCM -> [-1.0, 1.0)
        samples /= float(1 << (8 * segment.sample_width - 1))
        return samples
