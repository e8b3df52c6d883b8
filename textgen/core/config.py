# centralized configuration loader
# runs load_dotenv() to read .env
# everything here is read once at import and treated as immutable afterwards

import os
from dotenv import load_dotenv

load_dotenv()

# Router (OpenAI-compatible gateway)
ROUTER_URL = os.getenv("ROUTER_URL", "https://openrouter.ai/api/v1/chat/completions")
APP_REFERER = os.getenv("APP_REFERER", "http://localhost:3000")
APP_TITLE = os.getenv("APP_TITLE", "Video to Learning App")

# Generation defaults
DEFAULT_TEMPERATURE = float(os.getenv("DEFAULT_TEMPERATURE", "0.75"))
CONVERSATIONAL_MAX_TOKENS = int(os.getenv("CONVERSATIONAL_MAX_TOKENS", "4096"))
VIDEO_MIME_TYPE = os.getenv("VIDEO_MIME_TYPE", "video/mp4")

# Timeouts (seconds)
REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "120"))
CONNECT_TIMEOUT = float(os.getenv("CONNECT_TIMEOUT", "10"))

# Fallback keys for the HTTP surface; generate_text itself only uses the key on the request
ROUTER_API_KEY = os.getenv("ROUTER_API_KEY", "")
GOOGLE_API_KEY = os.getenv("GOOGLE_API_KEY", "")
ANTHROPIC_API_KEY = os.getenv("ANTHROPIC_API_KEY", "")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
