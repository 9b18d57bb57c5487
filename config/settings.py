"""
Configuration settings for Clarus Vitae.

Centralized configuration for review aggregation, comparison state,
privacy verification and logging.
"""

import os
from pathlib import Path

# Project paths
PROJECT_ROOT = Path(__file__).parent.parent
DATA_ROOT = Path(os.getenv("CLARUS_DATA_ROOT", str(PROJECT_ROOT / "data")))
OUTPUT_ROOT = Path(os.getenv("CLARUS_OUTPUT_ROOT", str(PROJECT_ROOT / "output")))

# Comparison
COMPARISON_STORAGE_KEY = "clarus-comparison"
MAX_COMPARISON_ITEMS = 4
COMPARE_PAGE_PATH = "/compare"
COMPARE_QUERY_PARAM = "properties"
COMPARISON_UPDATED_EVENT = "comparison-updated"

# Reviews listing
APPROVED_REVIEW_STATUS = "APPROVED"
REVIEWS_DEFAULT_LIMIT = 10
REVIEWS_MAX_LIMIT = 50
REVIEWS_DEFAULT_SORT = "newest"

# Privacy verification (in-memory only; externalize for multi-instance)
VERIFICATION_CODE_LENGTH = 6
VERIFICATION_CODE_EXPIRY_SECONDS = 30 * 60
VERIFICATION_MAX_ATTEMPTS = 5
RATE_LIMIT_WINDOW_SECONDS = 15 * 60
RATE_LIMIT_MAX_REQUESTS = 5

# Logging
LOG_LEVEL = os.getenv("CLARUS_LOG_LEVEL", "INFO")  # DEBUG, INFO, WARNING, ERROR
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FILE = os.getenv("CLARUS_LOG_FILE", "clarus.log")
