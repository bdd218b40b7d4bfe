import asyncio
import pytest
import numpy as np
from unittest.mock import Mock

from errors import InferenceError, TranscodeError
from pipeline import AudioChallengePipeline
from transcoder import AudioTranscoder


def make_pipeline(transcript="hello world"):
    transcoder = Mock(sample_rate=16000)
    transcoder.transcode.return_value = np.zeros(16000, dtype=np.float32)
    recognizer = Mock()
    recognizer.transcribe.return_value = transcript
    return AudioChallengePipeline(transcoder, recognizer), transcoder, recognizer


def test_resolve_transcodes_then_transcribes():
    pipeline, transcoder, recognizer = make_pipeline("3 9 1")

    assert asyncio.run(pipeline.resolve(b"audio")) == "3 9 1"
    transcoder.transcode.assert_called_once_with(b"audio")
    samples = recognizer.transcribe.call_args.args[0]
    assert samples.size == 16000


def test_corrupt_audio_raises_transcode_error():
    recognizer = Mock()
    pipeline = AudioChallengePipeline(AudioTranscoder(), recognizer)

    with pytest.raises(TranscodeError):
        asyncio.run(pipeline.resolve(b"\x00\x01definitely not audio" * 32))
    recognizer.transcribe.assert_not_called()


def test_inference_error_propagates_unchanged():
    pipeline, _, recognizer = make_pipeline()
    error = InferenceError("model failed")
    recognizer.transcribe.side_effect = error

    with pytest.raises(InferenceError) as exc_info:
        asyncio.run(pipeline.resolve(b"audio"))
    assert exc_info.value is error
