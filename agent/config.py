import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env from project root (parent of agent/)
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(env_path)

WHISPER_MODEL = os.getenv("WHISPER_MODEL", "base")
WHISPER_DEVICE = os.getenv("WHISPER_DEVICE", "cpu")
WHISPER_COMPUTE_TYPE = os.getenv("WHISPER_COMPUTE_TYPE", "int8")
WHISPER_LANGUAGE = os.getenv("WHISPER_LANGUAGE", "en")
DEMO_URL = "https://www.google.com/recaptcha/api2/demo"
MAX_TIME_SECONDS = 120
