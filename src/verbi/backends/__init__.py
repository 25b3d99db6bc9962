"""Translation providers and the dispatch table that builds them from config.

SDK-backed backends are imported lazily so their optional dependencies are
only needed when selected.
"""

from __future__ import annotations

import os
from collections.abc import Callable

from verbi.backends.base import TranslationBackend
from verbi.config import ProviderConfig
from verbi.errors import ConfigError


def _api_key(options: dict, env_var: str, provider: str) -> str:
    key = options.get("api_key") or os.environ.get(env_var)
    if not key:
        raise ConfigError(
            f"{provider} API key required. Set provider.config.api_key or {env_var}."
        )
    return key


def _sdk_options(options: dict, allowed: tuple[str, ...]) -> dict:
    return {k: v for k, v in options.items() if k in allowed}


def _create_openai(options: dict) -> TranslationBackend:
    from verbi.backends.openai import OpenAIBackend

    return OpenAIBackend(
        _api_key(options, "OPENAI_API_KEY", "OpenAI"),
        **_sdk_options(options, ("model", "temperature", "max_retries", "base_url")),
    )


def _create_anthropic(options: dict) -> TranslationBackend:
    from verbi.backends.anthropic import AnthropicBackend

    return AnthropicBackend(
        _api_key(options, "ANTHROPIC_API_KEY", "Anthropic"),
        **_sdk_options(options, ("model", "max_tokens", "max_retries", "base_url")),
    )


def _create_deepl(options: dict) -> TranslationBackend:
    from verbi.backends.deepl import DeepLBackend

    return DeepLBackend(
        _api_key(options, "DEEPL_API_KEY", "DeepL"),
        **_sdk_options(options, ("formality", "preserve_formatting")),
    )


def _create_dummy(options: dict) -> TranslationBackend:
    from verbi.backends.dummy import DummyBackend

    return DummyBackend()


def _provider_from_table(data: object, where: str) -> TranslationBackend:
    if not isinstance(data, dict) or "name" not in data:
        raise ConfigError(f"{where} must be a table with a 'name'")
    return create_provider(ProviderConfig(name=data["name"], config=data.get("config", {})))


def _create_router(options: dict) -> TranslationBackend:
    from verbi.backends.router import RouterBackend, RouterRule

    rules = []
    for i, rule in enumerate(options.get("rules", [])):
        match = rule.get("match")
        if isinstance(match, str):
            match = [match]
        if not match:
            raise ConfigError(f"router rule {i} needs a non-empty 'match'")
        rules.append(RouterRule(match=list(match), use=_provider_from_table(rule.get("use"), f"router rule {i} 'use'")))

    fallback = None
    if options.get("fallback") is not None:
        fallback = _provider_from_table(options["fallback"], "router 'fallback'")

    if not rules and fallback is None:
        raise ConfigError("router needs at least one rule or a fallback")
    return RouterBackend(rules, fallback)


PROVIDER_FACTORIES: dict[str, Callable[[dict], TranslationBackend]] = {
    "openai": _create_openai,
    "anthropic": _create_anthropic,
    "deepl": _create_deepl,
    "dummy": _create_dummy,
    "router": _create_router,
}


def create_provider(provider_config: ProviderConfig) -> TranslationBackend:
    """Build the backend named by ``provider_config.name``.

    Raises:
        ConfigError: unknown provider name or missing credentials.
    """
    factory = PROVIDER_FACTORIES.get(provider_config.name)
    if factory is None:
        known = ", ".join(sorted(PROVIDER_FACTORIES))
        raise ConfigError(f"Unknown provider: {provider_config.name} (expected one of: {known})")
    return factory(provider_config.config or {})
