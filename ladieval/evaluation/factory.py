from typing import Any, ClassVar

from ladieval.config.settings import Settings
from ladieval.evaluation.base import BaseEvaluator
from ladieval.evaluation.example_evaluator import ExampleEvaluator
from ladieval.evaluation.llm_evaluator import LlmEvaluator
from ladieval.evaluation.openai_client_adapter import OpenAIClientAdapter


class EvaluatorFactory:
    """Creates the configured stage evaluator."""

    OPENAI_COMPATIBLE_BASE_URLS: ClassVar[dict[str, str]] = {
        "openrouter": "https://openrouter.ai/api/v1",
        "groq": "https://api.groq.com/openai/v1",
        "together": "https://api.together.xyz/v1",
        "deepseek": "https://api.deepseek.com/v1",
        "ollama": "http://localhost:11434/v1",
    }

    @classmethod
    def create(cls, settings: Settings) -> BaseEvaluator:
        """Create a configured evaluator from application settings."""
        provider = settings.evaluation_provider.lower()
        if provider == "example":
            return ExampleEvaluator(
                delay_seconds=settings.example_delay_seconds,
                seed=settings.example_seed,
            )
        base_url = cls._resolve_base_url(provider, settings)
        client = OpenAIClientAdapter(
            api_key=cls._provider_setting(provider, settings, "api_key", ""),
            timeout_seconds=cls._provider_setting(provider, settings, "timeout_seconds", 120),
            base_url=base_url,
        )
        return LlmEvaluator(
            client=client,
            model=cls._provider_setting(provider, settings, "model_name", ""),
            temperature=cls._resolve_temperature(provider, settings),
            max_document_chars=settings.max_document_chars,
        )

    @classmethod
    def supported_providers(cls) -> list[str]:
        return ["example", "openai", "openai_compatible", *sorted(cls.OPENAI_COMPATIBLE_BASE_URLS)]

    @classmethod
    def _resolve_base_url(cls, provider: str, settings: Settings) -> str | None:
        if provider == "openai":
            return None
        if provider == "openai_compatible":
            url = (settings.evaluation_openai_compatible_base_url or "").strip()
            if not url:
                raise ValueError(
                    "evaluation_openai_compatible_base_url is required for "
                    "evaluation_provider=openai_compatible"
                )
            return url
        default_base_url = cls.OPENAI_COMPATIBLE_BASE_URLS.get(provider)
        if default_base_url is not None:
            return default_base_url
        raise ValueError(
            f"Unknown evaluation provider '{provider}'. "
            f"Choose from: {cls.supported_providers()}"
        )

    @staticmethod
    def _provider_setting(provider: str, settings: Settings, name: str, default: Any) -> Any:
        return getattr(settings, f"evaluation_{provider}_{name}", default) or default

    @classmethod
    def _resolve_temperature(cls, provider: str, settings: Settings) -> float:
        if provider == "openai":
            return settings.evaluation_openai_temperature
        return 0.2
