from dotenv import load_dotenv
import os

# .env 파일 로드
load_dotenv()

# --- Auth ---
SECRET_KEY = os.getenv("SECRET_KEY", "change-me")
ALGORITHM = os.getenv("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 60))

# --- Profile Store ---
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./nextgenfit.db")

# --- Local Cache ---
LOCAL_CACHE_DIR = os.getenv("LOCAL_CACHE_DIR", "./local_cache")

# --- Generation backend ---
GENERATION_PROVIDER = os.getenv("GENERATION_PROVIDER", "gemini").lower()
GENERATION_MODELS = [
    m.strip()
    for m in os.getenv("GENERATION_MODELS", "gemini-2.0-flash,gemini-1.5-flash,gemini-1.5-pro").split(",")
    if m.strip()
]
GENERATION_TIMEOUT_SECONDS = float(os.getenv("GENERATION_TIMEOUT_SECONDS", 45))

GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
AZURE_OPENAI_ENDPOINT = os.getenv("AZURE_OPENAI_ENDPOINT")
AZURE_OPENAI_KEY = os.getenv("AZURE_OPENAI_KEY")
AZURE_OPENAI_API_VERSION = os.getenv("AZURE_OPENAI_API_VERSION")
OLLAMA_HOST = os.getenv("OLLAMA_HOST")

# --- Persistence policies ---
# best_effort | strict, applied to both save and delete
REMOTE_WRITE_POLICY = os.getenv("REMOTE_WRITE_POLICY", "best_effort").lower()
# merge | write_back | remote_only
ROUTINE_READ_POLICY = os.getenv("ROUTINE_READ_POLICY", "merge").lower()

DAY_DETAIL_FALLBACK_URL = os.getenv("DAY_DETAIL_FALLBACK_URL", "/plans")

# --- Logging ---
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "text")
