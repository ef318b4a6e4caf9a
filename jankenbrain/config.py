from __future__ import annotations

from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from .options import Options


class Settings(BaseSettings):
    """Host settings, read from JANKEN_* environment variables or .env."""

    model_config = SettingsConfigDict(env_prefix="JANKEN_", env_file=".env", extra="ignore")

    log_level: str = "INFO"
    static_path: str = "./static"
    cors_origins: str = "*"
    random_seed: Optional[int] = None

    # defaults applied to every request that does not override them
    laplace_alpha: float = 1.0
    recency_decay_rate: float = 0.25
    expected_vs_winrate_blend: float = 0.7
    exploration_probability: float = 0.05
    transition_model_min_history: int = 3

    def default_options(self) -> Options:
        return Options(
            laplace_alpha=self.laplace_alpha,
            recency_decay_rate=self.recency_decay_rate,
            expected_vs_winrate_blend=self.expected_vs_winrate_blend,
            exploration_probability=self.exploration_probability,
            transition_model_min_history=self.transition_model_min_history,
        )

    def cors_origin_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]
