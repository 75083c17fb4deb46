"""
Feedback Theme Grouper - Configuration

All settings come from the environment with sensible defaults.
"""

import os
from pathlib import Path

# Output
OUTPUT_DIR = Path(os.getenv("FTG_OUTPUT_DIR", "./ftg_output"))
CSV_FILENAME = os.getenv("FTG_CSV_FILENAME", "cluster.csv")

# Embedding backend: "local" (sentence-transformers) or "ollama"
EMBED_BACKEND = os.getenv("FTG_EMBED_BACKEND", "local")
OLLAMA_URL = os.getenv("OLLAMA_URL", "http://localhost:11434")
EMBED_MODEL = os.getenv("FTG_EMBED_MODEL", "nomic-embed-text")
LOCAL_MODEL = os.getenv("FTG_LOCAL_MODEL", "all-MiniLM-L6-v2")

# Reduction / clustering
N_COMPONENTS = int(os.getenv("FTG_N_COMPONENTS", "5"))
MIN_CLUSTER_SIZE = int(os.getenv("FTG_MIN_CLUSTER_SIZE", "5"))
MIN_SAMPLES = int(os.getenv("FTG_MIN_SAMPLES", "3"))

# Word clouds
MAX_WORDS = int(os.getenv("FTG_MAX_WORDS", "100000"))
CLOUD_WIDTH = 1000
CLOUD_HEIGHT = 500
CLOUD_SEED = 0

LOG_LEVEL = os.getenv("FTG_LOG_LEVEL", "INFO").upper()
