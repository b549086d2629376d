from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Dict, Any
import yaml

from product_ranking.elo import DEFAULT_K_FACTOR, DEFAULT_RATING
from product_ranking.models import DEFAULT_USER_ID

DEFAULT_LEADERBOARD_SIZE = 10


@dataclass
class RankingSettings:
    k_factor: float = DEFAULT_K_FACTOR
    initial_rating: float = DEFAULT_RATING
    leaderboard_size: int = DEFAULT_LEADERBOARD_SIZE
    seed: Optional[int] = None
    verbose: bool = False
    db_path: Optional[str] = None
    user_id: str = DEFAULT_USER_ID

    def __post_init__(self):
        if self.k_factor <= 0:
            raise ValueError(f"k_factor must be positive, got {self.k_factor}")
        if self.leaderboard_size < 0:
            raise ValueError(f"leaderboard_size must be non-negative, got {self.leaderboard_size}")


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    if config_path is None:
        return {}
    
    config_path = Path(config_path)
    if not config_path.exists():
        return {}
    
    with open(config_path) as f:
        return yaml.safe_load(f) or {}


def get_config_value(config: Dict[str, Any], key_path: str, default: Any = None) -> Any:
    keys = key_path.split(".")
    value = config
    for key in keys:
        if isinstance(value, dict) and key in value:
            value = value[key]
        else:
            return default
    return value if value is not None else default


def resolve_settings(
    config: Dict[str, Any],
    *,
    k_factor: Optional[float] = None,
    initial_rating: Optional[float] = None,
    leaderboard_size: Optional[int] = None,
    seed: Optional[int] = None,
    verbose: Optional[bool] = None,
    db_path: Optional[str] = None,
    user_id: Optional[str] = None,
) -> RankingSettings:
    return RankingSettings(
        k_factor=float(k_factor if k_factor is not None else get_config_value(config, "ranking.k_factor", DEFAULT_K_FACTOR)),
        initial_rating=float(initial_rating if initial_rating is not None else get_config_value(config, "ranking.initial_rating", DEFAULT_RATING)),
        leaderboard_size=int(leaderboard_size if leaderboard_size is not None else get_config_value(config, "ranking.leaderboard_size", DEFAULT_LEADERBOARD_SIZE)),
        seed=seed if seed is not None else get_config_value(config, "ranking.seed"),
        verbose=bool(verbose if verbose is not None else get_config_value(config, "ranking.verbose", False)),
        db_path=db_path or get_config_value(config, "storage.db_path"),
        user_id=user_id or get_config_value(config, "ranking.user_id", DEFAULT_USER_ID),
    )
