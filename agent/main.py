import asyncio
import argparse
import json
import sys
from datetime import datetime
from dotenv import load_dotenv

# Force unbuffered output
sys.stdout.reconfigure(line_buffering=True)
sys.stderr.reconfigure(line_buffering=True)

from browser import BrowserController
from config import DEMO_URL, MAX_TIME_SECONDS, WHISPER_MODEL
from models import ChallengeSession, Outcome
from pipeline import AudioChallengePipeline
from recaptcha import RecaptchaSolver
from recognizer import SpeechRecognizer


async def main(
    url: str = DEMO_URL,
    headless: bool = False,
    model: str = WHISPER_MODEL,
    confirm_solved: bool = False,
    screenshot: str | None = None,
) -> dict:
    print(f"Starting reCAPTCHA audio solver", flush=True)
    print(f"Target: {url}", flush=True)
    print(f"Whisper model: {model}", flush=True)
    print(f"Headless: {headless}", flush=True)
    print("-" * 50, flush=True)

    browser = BrowserController()
    pipeline = AudioChallengePipeline(recognizer=SpeechRecognizer(model_name=model))
    solver = RecaptchaSolver(browser, pipeline, confirm_solved=confirm_solved)
    session = ChallengeSession(timeouts=solver.timeouts.model_copy())

    try:
        await browser.start(url, headless=headless)
        result = await asyncio.wait_for(solver.solve(session), timeout=MAX_TIME_SECONDS)
        outcome, reason = result.outcome.value, result.reason
        if screenshot:
            await browser.screenshot(path=screenshot)
            print(f"Screenshot saved to: {screenshot}")
    except asyncio.TimeoutError:
        print(f"\nTIMEOUT: Exceeded {MAX_TIME_SECONDS}s limit")
        outcome, reason = Outcome.FAILED.value, "timeout"
    finally:
        await browser.stop()

    session.metrics.print_summary(outcome, reason)
    results = session.metrics.get_summary(outcome, reason)
    results["url"] = url

    # Save results
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    results_file = f"results_{timestamp}.json"

    with open(results_file, "w") as f:
        json.dump(results, f, indent=2)

    print(f"\nResults saved to: {results_file}")

    return results


if __name__ == "__main__":
    load_dotenv()

    parser = argparse.ArgumentParser(description="reCAPTCHA v2 audio challenge solver")
    parser.add_argument("--url", default=DEMO_URL, help="Page with a reCAPTCHA v2 checkbox")
    parser.add_argument(
        "--headless",
        action="store_true",
        help="Run browser in headless mode"
    )
    parser.add_argument("--model", default=WHISPER_MODEL, help="faster-whisper model name or path")
    parser.add_argument(
        "--confirm-solved",
        action="store_true",
        help="Require the checkbox to show as ticked before reporting success"
    )
    parser.add_argument("--screenshot", help="Save a full-page screenshot here after solving")
    args = parser.parse_args()

    results = asyncio.run(main(
        url=args.url,
        headless=args.headless,
        model=args.model,
        confirm_solved=args.confirm_solved,
        screenshot=args.screenshot,
    ))
    sys.exit(0 if results["outcome"] == Outcome.SOLVED.value else 1)
