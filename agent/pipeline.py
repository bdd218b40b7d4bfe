import asyncio

from recognizer import SpeechRecognizer
from transcoder import AudioTranscoder


class AudioChallengePipeline:
    """Raw challenge audio in, transcript out."""

    def __init__(
        self,
        transcoder: AudioTranscoder | None = None,
        recognizer: SpeechRecognizer | None = None,
    ):
        self.transcoder = transcoder or AudioTranscoder()
        self.recognizer = recognizer or SpeechRecognizer()

    def transcribe_bytes(self, data: bytes) -> str:
        # TranscodeError / InferenceError propagate as-is so callers can tell them apart
        samples = self.transcoder.transcode(data)
        print(f"  -> transcoded {len(samples)} samples "
              f"({len(samples) / self.transcoder.sample_rate:.1f}s), transcribing...", flush=True)
        return self.recognizer.transcribe(samples)

    async def resolve(self, data: bytes) -> str:
        """Run transcoding and inference off the event loop."""
        return await asyncio.to_thread(self.transcribe_bytes, data)
