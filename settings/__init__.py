"""Application settings."""

import os
from pathlib import Path

# Database
DB_PATH = os.getenv("ELECTORAL_DB_PATH", "electoral.duckdb")

# Logging
LOG_DIR = Path("logs")

# Forecast defaults
MONTE_CARLO_ITERATIONS = int(os.getenv("MONTE_CARLO_ITERATIONS", "10000"))
CONFIDENCE_LEVEL = float(os.getenv("CONFIDENCE_LEVEL", "0.95"))
VOLATILITY_MULTIPLIER = float(os.getenv("VOLATILITY_MULTIPLIER", "1.2"))
TREND_WEIGHT = 0.4
POLLING_WEIGHT = 0.30
MIN_HISTORICAL_YEAR = 2002

# Worker
FORECAST_WORKERS = int(os.getenv("FORECAST_WORKERS", "2"))
FORECAST_SEED = int(os.environ["FORECAST_SEED"]) if os.getenv("FORECAST_SEED") else None

# Narrative (OpenAI-compatible chat completions endpoint)
NARRATIVE_API_URL = os.getenv("NARRATIVE_API_URL", "https://api.openai.com/v1")
NARRATIVE_API_KEY = os.getenv("NARRATIVE_API_KEY")
NARRATIVE_MODEL = os.getenv("NARRATIVE_MODEL", "gpt-4o")
NARRATIVE_TIMEOUT = 60
