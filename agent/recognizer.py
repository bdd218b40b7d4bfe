"""Whisper speech recognition via faster-whisper."""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Any

import numpy as np

from config import WHISPER_COMPUTE_TYPE, WHISPER_DEVICE, WHISPER_LANGUAGE, WHISPER_MODEL
from errors import InferenceError

if TYPE_CHECKING:
    from faster_whisper import WhisperModel

# Loaded models are shared by every recognizer in the process.
_models: dict[tuple[str, str, str], Any] = {}
_models_lock = threading.Lock()


def _create_model(name: str, device: str, compute_type: str) -> "WhisperModel":
    from faster_whisper import WhisperModel

    return WhisperModel(name, device=device, compute_type=compute_type)


def load_model(
    name: str = WHISPER_MODEL,
    device: str = WHISPER_DEVICE,
    compute_type: str = WHISPER_COMPUTE_TYPE,
) -> "WhisperModel":
    """Return the process-wide model for this configuration, loading it on first use."""
    key = (name, device, compute_type)
    model = _models.get(key)
    if model is not None:
        return model

    with _models_lock:
        model = _models.get(key)
        if model is None:
            print(f"--> Loading Whisper model '{name}' ({device}/{compute_type})...", flush=True)
            try:
                model = _create_model(name, device, compute_type)
            except Exception as e:
                raise InferenceError(f"failed to load Whisper model '{name}': {e}") from e
            _models[key] = model
    return model


class SpeechRecognizer:
    def __init__(
        self,
        *,
        model_name: str = WHISPER_MODEL,
        device: str = WHISPER_DEVICE,
        compute_type: str = WHISPER_COMPUTE_TYPE,
        language: str = WHISPER_LANGUAGE,
        model: Any = None,
    ) -> None:
        self.model_name = model_name
        self.device = device
        self.compute_type = compute_type
        self.language = language
        self._model = model

    @property
    def model(self) -> "WhisperModel":
        if self._model is None:
            self._model = load_model(self.model_name, self.device, self.compute_type)
        return self._model

    def transcribe(self, samples: np.ndarray) -> str:
        """Transcribe mono 16 kHz float32 samples. Segments are joined with single spaces."""
        audio = np.asarray(samples, dtype=np.float32)
        if audio.ndim != 1:
            raise InferenceError(f"expected 1-D mono samples, got shape={audio.shape!r}")
        if audio.size == 0:
            raise InferenceError("cannot transcribe an empty sample sequence")

        model = self.model
        try:
            segments, _info = model.transcribe(
                np.ascontiguousarray(audio),
                language=self.language,
                beam_size=5,
                without_timestamps=True,
                condition_on_previous_text=False,
            )
            # `segments` is a generator; decoding happens here.
            texts = [segment.text.strip() for segment in segments]
        except Exception as e:
            raise InferenceError(f"Whisper inference failed: {e}") from e

        return " ".join(text for text in texts if text)
