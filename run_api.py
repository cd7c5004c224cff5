"""
Run the Regulations.gov Assistant REST API.

Usage:
    python run_api.py

Environment variables (also read from a local .env file):
    REGULATIONS_GOV_API_KEY  Required. Free key from https://api.regulations.gov/
    LLM_PROVIDER             "google", "openai", "groq", or "ollama" (default: google)
    GEMINI_API_KEY           Required when LLM_PROVIDER=google
    OPENAI_API_KEY           Required when LLM_PROVIDER=openai
    GROQ_API_KEY             Required when LLM_PROVIDER=groq
    OLLAMA_BASE_URL          Ollama server URL (default: http://localhost:11434/)
    AGENT_MAX_ROUNDS         Tool rounds per chat message (default: 8)
    MODEL_TIMEOUT            Seconds per model call (default: 60)
    CORS_ORIGINS             Comma-separated allowed origins
    PORT                     Listen port (default: 3001)
"""

import os
import sys
from pathlib import Path

# Ensure src/ is importable
sys.path.insert(0, str(Path(__file__).parent / "src"))

import uvicorn

if __name__ == "__main__":
    uvicorn.run(
        "regassist.adapters.rest.app:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", "3001")),
        reload=True,
    )
