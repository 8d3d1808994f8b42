import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

# Base paths
BASE_DIR = Path(__file__).parent.parent
DATA_DIR = Path(os.getenv("DATA_DIR", str(BASE_DIR / "data")))

# Topics, responses and chat history live in one SQLite file
SQLITE_DB_PATH = os.getenv("SQLITE_DB_PATH", str(DATA_DIR / "gurus.db"))

# Ensure directories exist
DATA_DIR.mkdir(parents=True, exist_ok=True)

# LLM providers - a missing key only hides that provider's models
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o")

# Get your free API key at https://console.groq.com
GROQ_API_KEY = os.getenv("GROQ_API_KEY", "")

HUGGINGFACE_API_KEY = os.getenv("HUGGINGFACE_API_KEY", "")
HUGGINGFACE_BASE_URL = os.getenv(
    "HUGGINGFACE_BASE_URL", "https://api-inference.huggingface.co/models"
)

# Ollama is optional local fallback
OLLAMA_BASE_URL = os.getenv("OLLAMA_BASE_URL", "http://localhost:11434")
OLLAMA_MODEL = os.getenv("OLLAMA_MODEL", "mistral")
USE_OLLAMA_FALLBACK = os.getenv("USE_OLLAMA_FALLBACK", "false").lower() == "true"

# Generation settings
LLM_TEMPERATURE = float(os.getenv("LLM_TEMPERATURE", "0.0"))  # pipeline prompts
CHAT_TEMPERATURE = float(os.getenv("CHAT_TEMPERATURE", "0.7"))  # chat agents + copilot
LLM_MAX_TOKENS = int(os.getenv("LLM_MAX_TOKENS", "1024"))
LLM_TIMEOUT = float(os.getenv("LLM_TIMEOUT", "60"))  # seconds, httpx providers

# Pipeline settings
EXPERT_CONCURRENCY = int(os.getenv("EXPERT_CONCURRENCY", "0"))  # 0 = one request per worldview at once
PROCESS_DETAILS_LIMIT = int(os.getenv("PROCESS_DETAILS_LIMIT", "20"))  # topics kept for the transparency panel
CHAT_HISTORY_LIMIT = int(os.getenv("CHAT_HISTORY_LIMIT", "10"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# CORS
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173")
