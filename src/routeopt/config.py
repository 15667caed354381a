"""Application configuration and settings management."""

from pathlib import Path
from typing import Any, Literal, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

AlgorithmName = Literal["nearest_neighbor", "genetic", "simulated_annealing", "ant_colony", "hybrid"]


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="ROUTEOPT_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Route Optimization Engine"
    data_root: Path = Field(default=Path("data"), description="Root directory for persisted route outputs.")
    deliveries_file: Path = Field(
        default=Path("data/active_deliveries.csv"),
        description="CSV export of driver deliveries used by the file-backed delivery source.",
    )
    route_storage: Literal["memory", "file", "supabase"] = Field(
        default="memory",
        description="Backend used to persist optimized routes.",
    )
    routes_table: str = Field(default="optimized_routes", description="Supabase table holding optimized routes.")

    # Optimization defaults
    default_algorithm: AlgorithmName = "hybrid"
    max_routes: int = Field(default=5, ge=1)
    max_stops_per_route: int = Field(default=10, ge=1)
    active_deliveries_max_stops: int = Field(default=20, ge=1)
    time_limit_minutes: float = Field(default=30.0, gt=0.0)
    weight_distance: float = Field(default=0.4, ge=0.0)
    weight_time: float = Field(default=0.3, ge=0.0)
    weight_earnings: float = Field(default=0.3, ge=0.0)
    default_service_minutes: float = Field(default=10.0, ge=0.0)
    earnings_per_priority: float = Field(
        default=25.0,
        ge=0.0,
        description="Currency value assigned to one priority point when estimating route earnings.",
    )
    earnings_normalization: float = Field(default=1000.0, gt=0.0)
    active_statuses: tuple[str, ...] = Field(default=("ASSIGNED", "IN_PROGRESS"))

    # Genetic algorithm
    genetic_population_size: int = Field(default=50, ge=2)
    genetic_generations: int = Field(default=100, ge=1)
    genetic_mutation_rate: float = Field(default=0.1, ge=0.0, le=1.0)
    genetic_crossover_rate: float = Field(default=0.8, ge=0.0, le=1.0)

    # Simulated annealing
    annealing_initial_temperature: float = Field(default=1000.0, gt=0.0)
    annealing_cooling_rate: float = Field(default=0.95, gt=0.0, lt=1.0)
    annealing_min_temperature: float = Field(default=1.0, gt=0.0)

    # Ant colony
    ant_colony_num_ants: int = Field(default=20, ge=1)
    ant_colony_iterations: int = Field(default=50, ge=1)
    ant_colony_alpha: float = Field(default=1.0, ge=0.0)
    ant_colony_beta: float = Field(default=2.0, ge=0.0)
    ant_colony_evaporation_rate: float = Field(default=0.1, ge=0.0, le=1.0)
    ant_colony_pheromone_deposit: float = Field(default=1.0, ge=0.0)

    optimization_workers: int = Field(default=4, ge=1)

    # Supabase configuration
    supabase_url: Optional[str] = Field(
        default=None,
        description="Supabase project URL (e.g., https://xxx.supabase.co).",
    )
    supabase_key: Optional[str] = Field(
        default=None,
        description="Supabase service role key for backend operations.",
    )

    @field_validator("data_root", "deliveries_file", mode="before")
    @classmethod
    def _expand_path(cls, value: Any) -> Path:
        path_value = value if isinstance(value, Path) else Path(str(value))
        return path_value.expanduser().resolve()

    @field_validator("active_statuses", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()


settings = Settings()
