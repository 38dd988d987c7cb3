"""
Configuration management for the assistant core.
Loads settings from environment variables and the project .env file.
"""

from pathlib import Path
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv
from loguru import logger

# This file is at src/config/settings.py, so project root is 3 levels up
_project_root = Path(__file__).resolve().parent.parent.parent

PROJECT_ROOT = _project_root

_env_file = _project_root / ".env"
if _env_file.exists():
    load_dotenv(dotenv_path=_env_file, override=True)
    logger.debug(f"Loaded .env from: {_env_file}")
else:
    logger.warning(f".env file not found at: {_env_file}")
    load_dotenv(override=False)


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file=str(_project_root / ".env"),
        env_file_encoding="utf-8",
        extra="allow",
    )

    # LLM Provider Selection
    llm_provider: str = Field(default="openai")  # Options: "openai" | "ollama"

    # OpenAI Configuration
    openai_api_key: str = Field(default="")
    openai_model: str = Field(default="gpt-4o-mini")

    # Ollama Configuration
    ollama_base_url: str = Field(default="http://localhost:11434")
    ollama_model: str = Field(default="llama3")

    # Generation
    assistant_temperature: float = Field(default=0.4)
    max_output_tokens: int = Field(default=4000)
    web_search_tool_type: str = Field(default="")  # e.g. "web_search_preview"; empty disables tool binding

    # Conversation window sent to the backend (most recent N messages)
    max_conversation_messages: int = Field(default=20)

    # Session titles
    auto_title_enabled: bool = Field(default=True)
    auto_title_max_words: int = Field(default=4)
    default_session_title: str = Field(default="New Chat")

    # Team of Experts
    experts_max_tasks: int = Field(default=12)

    # Persona
    assistant_name: str = Field(default="Magnus AI")

    # Logging
    log_level: str = Field(default="INFO")
    log_to_file: bool = Field(default=True)
    log_dir: str = Field(default="data/logs")


settings = Settings()


def is_backend_configured() -> bool:
    """Whether enough configuration exists to build a generation backend."""
    provider = settings.llm_provider.lower()
    if provider == "openai":
        key = settings.openai_api_key.strip()
        return bool(key) and "PASTE_YOUR" not in key
    if provider == "ollama":
        return bool(settings.ollama_base_url.strip())
    return False


def resolve_log_dir() -> Path:
    """Absolute log directory (relative paths resolve against the project root)."""
    log_dir = Path(settings.log_dir)
    if not log_dir.is_absolute():
        log_dir = _project_root / log_dir
    return log_dir
