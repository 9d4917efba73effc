import os
from pathlib import Path
from dotenv import load_dotenv

# .env is loaded on first import, before Settings reads the environment.
load_dotenv()

# Repository root, so relative paths do not depend on the working directory.
PROJECT_ROOT = Path(__file__).resolve().parents[3]


def resolve_path(value: str | os.PathLike) -> Path:
    """Absolute paths pass through; relative ones are anchored at PROJECT_ROOT."""
    path = Path(value).expanduser()
    return path if path.is_absolute() else PROJECT_ROOT / path


# Gmail OAuth tokens live next to other local secrets, never in the package.
SECRETS_DIR = resolve_path(os.getenv("INBOX_INSIGHTS_SECRETS_DIR", "secrets"))
TOKENS_PATH = SECRETS_DIR / "gmail_tokens.json"
