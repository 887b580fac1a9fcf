import os
from pathlib import Path

from dotenv import load_dotenv

from models.common import parse_bool, parse_int

# Load environment variables from .env file in the backend folder
backend_dir = Path(__file__).parent
env_path = backend_dir / ".env"
load_dotenv(env_path)

API_PREFIX = os.getenv("API_PREFIX", "")
BACKEND_DIR = Path(__file__).parent
DATABASE_PATH = BACKEND_DIR / "acadnet.sqlite"
DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{DATABASE_PATH}")
PROJECT_PATH = BACKEND_DIR.parent

TESTING_MODE = parse_bool(os.getenv("TESTING_MODE", False))

# The upstream auth gateway puts the authenticated user id in this header
USER_ID_HEADER = os.getenv("USER_ID_HEADER", "X-User-Id")

# --- Candidate search ---
SEARCH_MIN_CHARS = parse_int(os.getenv("SEARCH_MIN_CHARS"), 2)
DEFAULT_SEARCH_LIMIT = parse_int(os.getenv("DEFAULT_SEARCH_LIMIT"), 10)
SEARCH_MAX_RESULTS = parse_int(os.getenv("SEARCH_MAX_RESULTS"), 50)
SUGGESTIONS_LIMIT = parse_int(os.getenv("SUGGESTIONS_LIMIT"), 5)

# Max ids bound in a single IN (...) clause
IN_QUERY_CHUNK = parse_int(os.getenv("IN_QUERY_CHUNK"), 500)
