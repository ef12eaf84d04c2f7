"""Application configuration loaded from config.yaml."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml


def _check_range(name: str, value: float, low: float, high: float | None = None) -> None:
    if value < low or (high is not None and value > high):
        bound = f">= {low}" if high is None else f"between {low} and {high}"
        raise ValueError(f"{name} must be {bound}, got {value!r}")


@dataclass(frozen=True)
class LLMConfig:
    model: str = "claude-haiku-4-5-20251001"
    timeout: int = 60
    max_tokens: int = 2048
    corrector_temperature: float = 0.0
    variant_temperature: float = 0.7
    polish_temperature: float = 0.4

    def __post_init__(self) -> None:
        _check_range("timeout", self.timeout, 1, 600)
        _check_range("max_tokens", self.max_tokens, 1)
        for name in ("corrector_temperature", "variant_temperature", "polish_temperature"):
            _check_range(name, getattr(self, name), 0.0, 1.0)


@dataclass(frozen=True)
class EngineConfig:
    batch_size: int = 5
    max_retries: int = 5
    retry_wait: float = 0.0
    attempt_timeout: float | None = None
    parallel_batches: bool = False
    variants_per_sentence: int = 2
    expected_input_languages: tuple[str, ...] = ("en",)

    def __post_init__(self) -> None:
        _check_range("batch_size", self.batch_size, 1, 50)
        _check_range("max_retries", self.max_retries, 0, 20)
        _check_range("retry_wait", self.retry_wait, 0.0)
        if self.attempt_timeout is not None and self.attempt_timeout <= 0:
            raise ValueError(f"attempt_timeout must be > 0, got {self.attempt_timeout!r}")
        _check_range("variants_per_sentence", self.variants_per_sentence, 1, 5)
        # YAML hands us a list
        object.__setattr__(
            self, "expected_input_languages", tuple(self.expected_input_languages)
        )


@dataclass(frozen=True)
class AppConfig:
    llm: LLMConfig = field(default_factory=LLMConfig)
    engine: EngineConfig = field(default_factory=EngineConfig)


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load config from YAML file, falling back to defaults."""
    if path is None:
        # Look for config.yaml relative to the project root
        candidates = [
            Path.cwd() / "config.yaml",
            Path(__file__).resolve().parent.parent.parent / "config.yaml",
        ]
        for c in candidates:
            if c.exists():
                path = c
                break

    raw: dict = {}
    if path is not None:
        p = Path(path)
        if p.exists():
            raw = yaml.safe_load(p.read_text()) or {}

    return AppConfig(
        llm=LLMConfig(**raw.get("llm", {})),
        engine=EngineConfig(**raw.get("engine", {})),
    )
