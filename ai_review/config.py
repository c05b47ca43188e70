from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import find_dotenv, load_dotenv

from ai_review.prompts import REVIEW_SYSTEM, REVIEW_USER_PREAMBLE

DEFAULT_ENDPOINTS: dict[str, str] = {
    "openai": "https://api.openai.com/v1/chat/completions",
    "dashscope": "https://dashscope.aliyuncs.com/api/v1/services/aigc/text-generation/generation",
    "mock": "mock://local",
}

DEFAULT_MODELS: dict[str, str] = {
    "openai": "gpt-4o-mini",
    "dashscope": "qwen-plus",
    "mock": "mock",
}

_PROVIDER_KEY_VARS: dict[str, str] = {
    "openai": "OPENAI_API_KEY",
    "dashscope": "DASHSCOPE_API_KEY",
}


@dataclass(frozen=True)
class ClientConfig:
    provider: str
    endpoint: str
    model: str
    system_prompt: str = REVIEW_SYSTEM
    user_preamble: str = REVIEW_USER_PREAMBLE
    timeout_s: float = 120.0
    api_key: str | None = None
    stream: bool = True
    temperature: float | None = None


def _parse_bool(value: str, *, name: str) -> bool:
    v = value.strip().lower()
    if v in {"1", "true", "yes", "on"}:
        return True
    if v in {"0", "false", "no", "off"}:
        return False
    raise ValueError(f"Invalid boolean for {name}: {value!r}")


def _parse_int(value: str, *, name: str) -> int:
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"Invalid integer for {name}: {value!r}") from exc


def _parse_float(value: str, *, name: str) -> float:
    try:
        return float(value)
    except ValueError as exc:
        raise ValueError(f"Invalid number for {name}: {value!r}") from exc


def load_env() -> None:
    # Allow users to keep secrets in a local `.env` (not committed), found from the working directory.
    load_dotenv(find_dotenv(usecwd=True), override=False)


def env_int(key: str, default: int) -> int:
    v = os.getenv(key)
    if v is None or not v.strip():
        return default
    return _parse_int(v.strip(), name=key)


def load_config(provider: str | None = None) -> ClientConfig:
    load_env()

    def getenv(key: str, default: str | None = None) -> str | None:
        v = os.getenv(key)
        if v is None or v == "":
            return default
        return v

    provider = (provider or getenv("AI_REVIEW_PROVIDER", "openai") or "openai").strip().lower()
    if provider not in DEFAULT_ENDPOINTS:
        raise ValueError(
            f"Unknown AI_REVIEW_PROVIDER={provider!r}, choose one of: {'|'.join(DEFAULT_ENDPOINTS)}"
        )

    endpoint = getenv("AI_REVIEW_ENDPOINT", DEFAULT_ENDPOINTS.get(provider, "")) or ""
    model = getenv("AI_REVIEW_MODEL", DEFAULT_MODELS.get(provider, "")) or ""

    # Prompts are deployment configuration; the defaults live in ai_review.prompts.
    system_prompt = getenv("AI_REVIEW_SYSTEM_PROMPT", REVIEW_SYSTEM) or ""
    user_preamble = getenv("AI_REVIEW_USER_PREAMBLE", REVIEW_USER_PREAMBLE) or ""

    timeout_s = _parse_float(getenv("AI_REVIEW_TIMEOUT_S", "120") or "120", name="AI_REVIEW_TIMEOUT_S")
    if timeout_s <= 0:
        raise ValueError(f"AI_REVIEW_TIMEOUT_S must be positive, got {timeout_s}")
    stream = _parse_bool(getenv("AI_REVIEW_STREAM", "true") or "true", name="AI_REVIEW_STREAM")

    temperature_raw = getenv("AI_REVIEW_TEMPERATURE", None)
    temperature = (
        _parse_float(temperature_raw, name="AI_REVIEW_TEMPERATURE") if temperature_raw is not None else None
    )

    api_key = getenv("AI_REVIEW_API_KEY", None)
    if api_key is None and provider in _PROVIDER_KEY_VARS:
        api_key = getenv(_PROVIDER_KEY_VARS[provider], None)

    return ClientConfig(
        provider=provider,
        endpoint=endpoint,
        model=model,
        system_prompt=system_prompt,
        user_preamble=user_preamble,
        timeout_s=timeout_s,
        api_key=api_key,
        stream=stream,
        temperature=temperature,
    )
