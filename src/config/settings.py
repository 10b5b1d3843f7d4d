"""Application settings loaded from environment variables via pydantic-settings.

Field names map to upper-cased environment variables (``openai_api_key`` ->
``OPENAI_API_KEY``).  Environment variables win over the ``.env`` file, which
wins over the defaults below.  Empty string means "not configured".
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """BrandKit application settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # === OpenAI-compatible endpoint (TogetherAI by default) ===
    openai_api_key: str = ""
    openai_base_url: str = "https://api.together.xyz/v1"
    openai_chat_model: str = "mistralai/Mistral-7B-Instruct-v0.1"
    openai_embedding_model: str = "BAAI/bge-large-en-v1.5"

    # === Anthropic (preferred chat model when a key is present) ===
    anthropic_api_key: str = ""
    anthropic_model: str = "claude-sonnet-4-20250514"

    # === Embeddings ===
    # Used when the embedding model is not in the provider's dimension table.
    embedding_dimension: int = 1024
    # Upper bound on simultaneous per-text embedding requests in one batch.
    embedding_concurrency: int = 8

    # === Vector store ===
    chromadb_persist_dir: str = "./data/chromadb"
    chromadb_host: str = ""  # set to use a remote Chroma server instead of local persistence
    chromadb_port: int = 8000
    chromadb_collection: str = "brand-variables"

    # === Chat ===
    rag_top_k: int = 6
    chat_temperature: float = 0.5
    chat_max_tokens: int = 1024
    llm_timeout: float = 60.0

    # === App Config ===
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    app_env: str = "development"
    log_level: str = "INFO"
