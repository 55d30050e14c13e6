"""Runtime settings for simpletodo.

Values come from the environment (optionally a local `.env` file).
"""

import os
from dotenv import load_dotenv

load_dotenv()

# Directory holding tasks.json, config.json and prompt-events.json
DATA_DIR = os.getenv("DATA_DIR", os.path.join(os.getcwd(), "data"))

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "3001"))

# Frontend origin allowed by CORS
CORS_ORIGIN = os.getenv("CORS_ORIGIN", "http://localhost:3000")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
DEBUG = os.getenv("DEBUG", "False").lower() == "true"
