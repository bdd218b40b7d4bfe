"""reCAPTCHA v2 solver: ticks the checkbox and answers the audio challenge with Whisper."""

from typing import Optional

from browser import BrowserController
from dom_parser import extract_audio_source
from handlers import RATE_LIMIT_PHRASES, is_rate_limited
from models import AudioArtifact, ChallengeSession, SolverTimeouts, State, VerificationOutcome
from pipeline import AudioChallengePipeline
from surface import AudioTranscriber, BrowsingSurface, Element

ANCHOR_FRAME = 'iframe[src*="recaptcha/api2/anchor"]'
CHALLENGE_FRAME = 'iframe[src*="recaptcha/api2/bframe"]'

ANCHOR = "#recaptcha-anchor"
CHECKED_ANCHOR = '#recaptcha-anchor[aria-checked="true"]'
CHALLENGE_BODY = "body"
AUDIO_BUTTON = "#recaptcha-audio-button"
AUDIO_ERROR = ".rc-audiochallenge-error-message"
AUDIO_SOURCE = "#audio-source"
AUDIO_RESPONSE = "#audio-response"
VERIFY_BUTTON = "#recaptcha-verify-button"


class RecaptchaSolver:
    def __init__(
        self,
        surface: BrowsingSurface,
        pipeline: AudioTranscriber | None = None,
        timeouts: SolverTimeouts | None = None,
        *,
        rate_limit_phrases: tuple[str, ...] = RATE_LIMIT_PHRASES,
        confirm_solved: bool = False,
        anchor_frame: str = ANCHOR_FRAME,
        challenge_frame: str = CHALLENGE_FRAME,
    ):
        self.surface = surface
        self.pipeline = pipeline or AudioChallengePipeline()
        self.timeouts = timeouts or SolverTimeouts()
        self.rate_limit_phrases = rate_limit_phrases
        self.confirm_solved = confirm_solved
        self.anchor_frame = anchor_frame
        self.challenge_frame = challenge_frame

    async def solve(self, session: ChallengeSession | None = None) -> VerificationOutcome:
        """Run one session to a terminal state. Never raises."""
        session = session or ChallengeSession(timeouts=self.timeouts.model_copy())
        try:
            await self._run(session)
        except Exception as e:
            print(f"Error solving captcha: {e}", flush=True)
            if not session.finished:
                session.finish(State.FAILED, f"unexpected error: {e}")
        return session.result()

    async def _run(self, session: ChallengeSession) -> None:
        t = session.timeouts

        anchor = await self.surface.find(ANCHOR, frame=self.anchor_frame, timeout_ms=t.probe_ms)
        if anchor is None:
            print("--> No reCAPTCHA checkbox on page", flush=True)
            session.finish(State.NOT_PRESENT, "no reCAPTCHA checkbox on page")
            return
        session.advance(State.DETECTED)
        print("--> reCAPTCHA detected, solving...", flush=True)

        await anchor.click()
        session.advance(State.CLICKED)
        await self.surface.wait(t.click_settle_ms)

        # No challenge frame means the tick was accepted outright
        body = await self.surface.find(CHALLENGE_BODY, frame=self.challenge_frame, timeout_ms=t.challenge_ms)
        if body is None:
            print("--> No challenge presented", flush=True)
            await self._finish_verified(session, "checkbox accepted without a challenge")
            return
        session.advance(State.AWAITING_CHALLENGE)

        if is_rate_limited(await body.text(), self.rate_limit_phrases):
            print("--> Challenge frame asks to try again later, giving up", flush=True)
            session.finish(State.BLOCKED, "rate limited before audio request")
            return

        audio_button = await self.surface.find(AUDIO_BUTTON, frame=self.challenge_frame, timeout_ms=t.probe_ms)
        if audio_button is None:
            print("--> No audio option, image challenge only", flush=True)
            session.finish(State.NO_AUDIO_OPTION, "no audio challenge button")
            return
        await audio_button.click()
        session.advance(State.AUDIO_REQUESTED)

        error = await self.surface.find(AUDIO_ERROR, frame=self.challenge_frame, timeout_ms=t.audio_error_ms)
        if error is not None:
            print("--> Audio challenge shows an error message, giving up", flush=True)
            session.finish(State.BLOCKED, "audio challenge error message")
            return
        if is_rate_limited(await body.text(), self.rate_limit_phrases):
            print("--> Challenge frame asks to try again later, giving up", flush=True)
            session.finish(State.BLOCKED, "rate limited after audio request")
            return

        url = await self._audio_source(body, t.probe_ms)
        if not url:
            session.finish(State.FAILED, "no audio source")
            return

        print("--> Audio challenge detected, downloading...", flush=True)
        try:
            artifact = AudioArtifact(source=url, data=await self.surface.fetch(url))
        except Exception as e:
            print(f"Error downloading challenge audio: {e}", flush=True)
            session.finish(State.FAILED, f"audio fetch failed: {e}")
            return
        session.advance(State.AUDIO_RECEIVED)
        print(f"--> Audio file downloaded ({artifact.size} bytes), transcribing...", flush=True)

        try:
            text = await self.pipeline.resolve(artifact.data)
        except Exception as e:
            print(f"Error handling audio challenge: {e}", flush=True)
            session.finish(State.FAILED, f"{type(e).__name__}: {e}")
            return
        if not text.strip():
            session.finish(State.FAILED, "empty transcription")
            return
        session.advance(State.TRANSCRIBED)
        print(f"--> Transcribed text: {text}", flush=True)

        response = await self.surface.find(AUDIO_RESPONSE, frame=self.challenge_frame, timeout_ms=t.probe_ms)
        verify = await self.surface.find(VERIFY_BUTTON, frame=self.challenge_frame, timeout_ms=t.probe_ms)
        if response is None or verify is None:
            session.finish(State.FAILED, "response field or verify button missing")
            return
        await response.fill(text)
        await verify.click()
        session.advance(State.SUBMITTED)

        await self.surface.wait(t.submit_settle_ms)
        await self._finish_verified(session, None)

    async def _audio_source(self, body: Element, timeout_ms: int) -> Optional[str]:
        # <audio> has no box, so it is never "visible"
        source = await self.surface.find(
            AUDIO_SOURCE, frame=self.challenge_frame, timeout_ms=timeout_ms, visible=False
        )
        if source is not None:
            url = await source.attribute("src")
            if url:
                return url
        return extract_audio_source(await body.html())

    async def _finish_verified(self, session: ChallengeSession, note: Optional[str]) -> None:
        if self.confirm_solved:
            checked = await self.surface.find(
                CHECKED_ANCHOR, frame=self.anchor_frame, timeout_ms=session.timeouts.probe_ms
            )
            if checked is None:
                session.finish(State.FAILED, "checkbox not ticked")
                return
        session.finish(State.VERIFIED, note)


async def solve_recaptcha(page, **kwargs) -> bool:
    """
    Detect a reCAPTCHA v2 checkbox on a Playwright page and solve its audio challenge.
    Returns True once the checkbox was accepted or the transcription submitted.
    """
    solver = RecaptchaSolver(BrowserController.from_page(page), **kwargs)
    result = await solver.solve()
    return result.solved
