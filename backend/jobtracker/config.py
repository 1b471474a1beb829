from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # App
    app_name: str = "Job Application Tracker"
    debug: bool = True

    # CORS
    frontend_url: str = "http://localhost:5173"

    # Auth: bearer token -> user id. Unknown tokens are rejected unless
    # allow_dev_tokens is set and the table is empty, in which case every
    # token maps to its own stable dev user id.
    api_tokens: dict[str, str] = {}
    allow_dev_tokens: bool = False

    # LLM (server-side keys, the caller never sends provider credentials)
    llm_provider: str = "openai"
    llm_model_key: str = "gpt-4o-mini"
    llm_timeout_seconds: float = 60.0
    openai_api_key: Optional[str] = None
    groq_api_key: Optional[str] = None
    gemini_api_key: Optional[str] = None
    openrouter_api_key: Optional[str] = None

    # Persistence
    data_dir: str = "data/users"
    autosave_delay_seconds: float = 1.0

    # Export
    pdf_compression: bool = True

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    def api_key_for(self, provider: str) -> str | None:
        return {
            "openai": self.openai_api_key,
            "groq": self.groq_api_key,
            "google": self.gemini_api_key,
            "openrouter": self.openrouter_api_key,
        }.get(provider)


settings = Settings()


# ── Model Registry ──────────────────────────────────────────────────────────

MODELS = {
    "openai": {
        "gpt-4o-mini": {"model_id": "openai/gpt-4o-mini"},
    },
    "groq": {
        "llama-3.3-70b": {"model_id": "groq/llama-3.3-70b-versatile"},
    },
    "google": {
        "gemini-2.0-flash": {"model_id": "gemini/gemini-2.0-flash"},
    },
    "openrouter": {
        "deepseek-r1-0528": {"model_id": "openrouter/deepseek/deepseek-r1-0528:free"},
    },
}

# ── Prompt Configuration ────────────────────────────────────────────────────

PROMPT_CONFIG = {
    "jd_parser": {"temperature": 0.3, "max_tokens": 1500},
    "application_generator": {"temperature": 0.5, "max_tokens": 4000},
}
