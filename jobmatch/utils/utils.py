from typing import Callable, List, Optional

import requests

from jobmatch.config import (
    GROQ_API_KEY, GROQ_BASE_URL, GROQ_MODEL,
    NVIDIA_API_KEY, NVIDIA_BASE_URL, NVIDIA_MODEL,
    EMBED_API_KEY, EMBED_BASE_URL, EMBED_MODEL, EMBED_DIM,
    LLM_TIMEOUT,
)
from jobmatch.utils.exceptions import ConfigurationError, ModelError
from jobmatch.utils.logging_config import get_logger

logger = get_logger(__name__)

# chat(prompt, system) -> text
ChatFn = Callable[..., str]


def chat_completion(
    prompt: str,
    *,
    provider: str,
    base_url: str,
    api_key: str,
    model: str,
    system: Optional[str] = None,
    temperature: float = 0.1,
    max_tokens: int = 2000,
) -> str:
    """Single attempt against an OpenAI-compatible ``/chat/completions`` endpoint."""
    messages = []
    if system:
        messages.append({"role": "system", "content": system})
    messages.append({"role": "user", "content": prompt})

    resp = requests.post(
        f"{base_url.rstrip('/')}/chat/completions",
        headers={
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        },
        json={
            "model": model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        },
        timeout=LLM_TIMEOUT,
    )
    if not resp.ok:
        raise ModelError(
            f"{provider} API error: {resp.status_code} - {resp.text[:200]}",
            model_name=model,
            provider=provider,
        )

    choices = resp.json().get("choices") or []
    content = ""
    if choices:
        content = ((choices[0] or {}).get("message") or {}).get("content") or ""
    content = content.strip()
    if not content:
        raise ModelError(f"No response from {provider}", model_name=model, provider=provider)
    logger.debug(f"{provider} answered with {len(content)} chars")
    return content


def _require_key(name: str, value: str) -> None:
    if not value:
        raise ConfigurationError(f"{name} is not configured", config_key=name)


def groq_chat(prompt: str, system: Optional[str] = None, temperature: float = 0.1, max_tokens: int = 2000) -> str:
    _require_key("GROQ_API_KEY", GROQ_API_KEY)
    return chat_completion(
        prompt,
        provider="groq",
        base_url=GROQ_BASE_URL,
        api_key=GROQ_API_KEY,
        model=GROQ_MODEL,
        system=system,
        temperature=temperature,
        max_tokens=max_tokens,
    )


def nvidia_chat(prompt: str, system: Optional[str] = None, temperature: float = 0.7, max_tokens: int = 2000) -> str:
    _require_key("NVIDIA_API_KEY", NVIDIA_API_KEY)
    return chat_completion(
        prompt,
        provider="nvidia",
        base_url=NVIDIA_BASE_URL,
        api_key=NVIDIA_API_KEY,
        model=NVIDIA_MODEL,
        system=system,
        temperature=temperature,
        max_tokens=max_tokens,
    )


def embed_text(text: str) -> List[float]:
    resp = requests.post(
        f"{EMBED_BASE_URL.rstrip('/')}/embeddings",
        headers={"Authorization": f"Bearer {EMBED_API_KEY}"},
        json={"model": EMBED_MODEL, "input": text},
        timeout=LLM_TIMEOUT,
    )
    resp.raise_for_status()
    data = resp.json().get("data") or []
    if not data:
        raise ModelError("Embedding response carried no vectors", model_name=EMBED_MODEL)
    vector = [float(x) for x in data[0].get("embedding") or []]
    if len(vector) != EMBED_DIM:
        raise ModelError(
            f"Expected a {EMBED_DIM}-dimensional embedding, got {len(vector)}",
            model_name=EMBED_MODEL,
        )
    return vector
