from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # --- Runtime ---
    ENV: str = "dev"  # dev|test|prod
    RENTGRID_DB_URL: str = "sqlite+aiosqlite:///./rentgrid.db"
    LOG_LEVEL: str = "INFO"

    # --- Listings source: sql | stub_json | supabase ---
    LISTINGS_SOURCE: str = "sql"
    STUB_LISTINGS_PATH: str = "data/rentals.json"

    # --- Supabase / PostgREST (rentals table) ---
    SUPABASE_URL: str | None = None
    SUPABASE_ANON_KEY: str | None = None
    SUPABASE_RENTALS_TABLE: str = "rentals"

    # --- Outbound HTTP (data source only) ---
    HTTP_TIMEOUT_S: float = 20.0
    HTTP_MAX_RETRIES: int = 2
    HTTP_BACKOFF_BASE_S: float = 0.5
    HTTP_CIRCUIT_FAIL_THRESHOLD: int = 5
    HTTP_CIRCUIT_RESET_S: float = 60.0

    # --- Grid / color scale ---
    GRID_CELL_SIZE: float = 0.008
    GRID_OVERLAP: float = 0.08
    SCALE_REGIME: str = "discrete"  # discrete|continuous

    # --- Fallback sample batch (used when the source is down) ---
    SAMPLE_SEED: int = 42

    # --- Heat-map cache + scheduler ---
    DEFAULT_BEDROOMS: int | None = 0  # studios
    CACHE_TTL_S: int = 900
    SCHED_REFRESH_INTERVAL_MINUTES: int = 15
    # comma-separated, "all" means no bedroom filter
    SCHED_BEDROOM_FILTERS: str = "all,0,1,2,3,4"


settings = Settings()
