from dotenv import load_dotenv
import os

load_dotenv()

APP_ENV = os.getenv("APP_ENV", "development")
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "3001"))

# Model configuration (credential itself is read lazily by the model gateway)
DEFAULT_MODEL = "google/gemini-2.0-flash-001"
THREATLENS_MODEL = os.getenv("THREATLENS_MODEL", DEFAULT_MODEL)

NPM_REGISTRY_URL = os.getenv("NPM_REGISTRY_URL", "https://registry.npmjs.org")
