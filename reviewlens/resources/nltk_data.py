"""
NLTK corpus helper.

Makes sure a corpus is available locally, downloading it on first use.
"""

import logging

import nltk

from reviewlens.errors import ConfigurationError

logger = logging.getLogger(__name__)


def ensure_corpus(name: str) -> None:
    """
    Make sure corpora/<name> is installed, downloading it if missing.

    Raises:
        ConfigurationError: If the corpus is missing and cannot be downloaded
    """
    try:
        nltk.data.find(f"corpora/{name}")
        return
    except LookupError:
        logger.info(f"NLTK corpus '{name}' not found, downloading")

    if not nltk.download(name, quiet=True):
        raise ConfigurationError(
            f"NLTK corpus '{name}' is not installed and could not be downloaded. "
            f"Run: python -m nltk.downloader {name}"
        )
