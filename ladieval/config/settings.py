from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    evaluation_provider: str = "example"
    stage_timeout_seconds: float | None = None

    max_document_size_bytes: int = 10 * 1024 * 1024
    accepted_extensions: list[str] = [".pdf", ".docx", ".doc"]
    max_document_chars: int = 200_000

    example_delay_seconds: float = 0.0
    example_seed: int | None = None

    evaluation_openai_api_key: str = ""
    evaluation_openai_model_name: str = ""
    evaluation_openai_timeout_seconds: int = 120
    evaluation_openai_temperature: float = 0.2

    evaluation_openai_compatible_api_key: str = ""
    evaluation_openai_compatible_model_name: str = ""
    evaluation_openai_compatible_timeout_seconds: int = 120
    evaluation_openai_compatible_base_url: str = ""

    evaluation_openrouter_api_key: str = ""
    evaluation_openrouter_model_name: str = ""
    evaluation_openrouter_timeout_seconds: int = 120

    evaluation_groq_api_key: str = ""
    evaluation_groq_model_name: str = ""
    evaluation_groq_timeout_seconds: int = 120

    evaluation_together_api_key: str = ""
    evaluation_together_model_name: str = ""
    evaluation_together_timeout_seconds: int = 120

    evaluation_deepseek_api_key: str = ""
    evaluation_deepseek_model_name: str = ""
    evaluation_deepseek_timeout_seconds: int = 120

    evaluation_ollama_api_key: str = ""
    evaluation_ollama_model_name: str = ""
    evaluation_ollama_timeout_seconds: int = 300
