"""
config.py — Konfiguracja aplikacji przez zmienne środowiskowe.
Wszystkie zmienne mają prefiks DECISION_RULES_.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Logging
    log_level: str = "INFO"

    # Evaluator: kroki ewaluacji w odpowiedziach API / na wyjściu CLI
    trace_evaluation: bool = False

    # Limit długości tekstu reguły przyjmowanego przez API (znaki)
    max_rule_length: int = 10_000

    # Limit głębokości drzewa warunku zwracanego przez /parse (poziomy AST)
    max_condition_depth: int = 100

    # App
    app_title: str = "DecisionRules"
    app_version: str = "0.1.0"

    model_config = SettingsConfigDict(env_prefix="DECISION_RULES_", env_file=".env", extra="ignore")
