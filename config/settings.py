"""
Configuration settings for ReviewLens.

Centralized defaults for every pipeline stage. Values can be overridden
through environment variables or, per run, through CLI arguments.
"""

import os
from pathlib import Path


def _env_list(name: str, default: str) -> list:
    return [t.strip() for t in os.getenv(name, default).split(",") if t.strip()]


# Project paths
PROJECT_ROOT = Path(__file__).parent.parent
DATA_ROOT = PROJECT_ROOT / "data"
OUTPUT_ROOT = PROJECT_ROOT / "output"

# Corpus Normalizer
# Product self-references and pronouns that dominate counts without signal
DOMAIN_STOPWORDS = _env_list(
    "REVIEWLENS_DOMAIN_STOPWORDS",
    "echo,alexa,amazon,dot,device,product,speaker,im,ive,get,one,use,would,also,really"
)
NORMALIZATION_N_JOBS = int(os.getenv("REVIEWLENS_NORMALIZATION_N_JOBS", "1"))

# Frequency Analyzer
FREQUENCY_TOP_TERMS = 20

# Sentiment Scorer
NEGATIVE_WEIGHT = float(os.getenv("REVIEWLENS_NEGATIVE_WEIGHT", "2.0"))
LEXICON_PATH = os.getenv("REVIEWLENS_LEXICON_PATH", "")  # empty = NLTK Bing lexicon

# Topic Model Selector
TOPIC_K_MIN = 2
TOPIC_K_MAX = 10
TOPIC_TOP_TERMS = 8
RANDOM_SEED = 123
ELBOW_RELATIVE_THRESHOLD = 0.1
HOLDOUT_FRACTION = 0.2
LDA_MAX_ITER = 20
TOPIC_N_JOBS = int(os.getenv("REVIEWLENS_TOPIC_N_JOBS", "1"))

# Topic Labeler (optional)
GOOGLE_API_KEY = os.getenv("GOOGLE_API_KEY", "")
LABELING_MODEL = "gemini-1.5-flash"
LLM_TEMPERATURE = 0.0  # Deterministic labels
LABELING_MAX_RETRIES = 3
LABELING_CONTEXT = "customer reviews of a smart speaker"

# Logging
LOG_LEVEL = os.getenv("REVIEWLENS_LOG_LEVEL", "INFO")  # DEBUG, INFO, WARNING, ERROR
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FILE = "reviewlens.log"
