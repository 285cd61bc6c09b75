# nextgenfit/utils/llm_client.py
"""
Generation backends. Each provider exposes ``async generate(model, prompt) -> str``.

Clients are built lazily so a missing key only fails the request that needs it,
never the import.
"""
import logging
from typing import Awaitable, Callable

from nextgenfit.core import config
from nextgenfit.core.exceptions import BackendNotConfigured

logger = logging.getLogger(__name__)

GenerateFn = Callable[[str, str], Awaitable[str]]

_clients: dict = {}


def _gemini_client():
    if "gemini" not in _clients:
        if not config.GEMINI_API_KEY:
            raise BackendNotConfigured("Server configuration error: GEMINI_API_KEY is missing")
        from google import genai
        _clients["gemini"] = genai.Client(api_key=config.GEMINI_API_KEY)
    return _clients["gemini"]


def _openai_client():
    if "openai" not in _clients:
        if not config.OPENAI_API_KEY:
            raise BackendNotConfigured("Server configuration error: OPENAI_API_KEY is missing")
        from openai import AsyncOpenAI
        _clients["openai"] = AsyncOpenAI(api_key=config.OPENAI_API_KEY, max_retries=0)
    return _clients["openai"]


def _azure_client():
    if "azure" not in _clients:
        if not (config.AZURE_OPENAI_KEY and config.AZURE_OPENAI_ENDPOINT):
            raise BackendNotConfigured("Server configuration error: AZURE_OPENAI_KEY / AZURE_OPENAI_ENDPOINT missing")
        from openai import AsyncAzureOpenAI
        _clients["azure"] = AsyncAzureOpenAI(
            api_key=config.AZURE_OPENAI_KEY,
            azure_endpoint=config.AZURE_OPENAI_ENDPOINT,
            api_version=config.AZURE_OPENAI_API_VERSION,
            max_retries=0,
        )
    return _clients["azure"]


async def generate_gemini(model: str, prompt: str) -> str:
    response = await _gemini_client().aio.models.generate_content(model=model, contents=prompt)
    return response.text or ""


async def _chat_completion(client, model: str, prompt: str) -> str:
    # 후보 하나당 정확히 한 번만 호출 (SDK 자체 재시도는 max_retries=0 으로 끔)
    response = await client.chat.completions.create(
        model=model,
        messages=[{"role": "user", "content": prompt}],
        temperature=0.4,
    )
    return response.choices[0].message.content or ""


async def generate_openai(model: str, prompt: str) -> str:
    return await _chat_completion(_openai_client(), model, prompt)


async def generate_azure(model: str, prompt: str) -> str:
    return await _chat_completion(_azure_client(), model, prompt)


def _ollama_client():
    if "ollama" not in _clients:
        import ollama
        _clients["ollama"] = ollama.AsyncClient(host=config.OLLAMA_HOST)
    return _clients["ollama"]


async def generate_ollama(model: str, prompt: str) -> str:
    response = await _ollama_client().generate(model=model, prompt=prompt)
    return response["response"]


PROVIDERS: dict[str, GenerateFn] = {
    "gemini": generate_gemini,
    "openai": generate_openai,
    "azure": generate_azure,
    "ollama": generate_ollama,
}


def get_generate_fn(provider: str | None = None) -> GenerateFn:
    provider = (provider or config.GENERATION_PROVIDER).lower()
    try:
        return PROVIDERS[provider]
    except KeyError:
        raise BackendNotConfigured(
            f"Unknown GENERATION_PROVIDER '{provider}' (expected one of {', '.join(PROVIDERS)})"
        ) from None
