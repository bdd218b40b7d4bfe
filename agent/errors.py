"""Errors raised by the audio pipeline and the browsing surface."""


class SolverError(Exception):
    """Base class for solver errors."""


class TranscodeError(SolverError):
    """Audio could not be decoded or converted to 16 kHz mono PCM."""


class InferenceError(SolverError):
    """The speech recognizer rejected its input or the model failed."""


class FetchError(SolverError):
    """The challenge audio could not be downloaded."""
