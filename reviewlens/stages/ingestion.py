"""
Review Loader.

Reads review records from CSV or JSON files into Review objects.
Also generates deterministic sample reviews for demos and tests.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional

import pandas as pd

from reviewlens.models.review import Review

logger = logging.getLogger(__name__)

DEFAULT_COLUMNS = {
    "review_id": "review_id",
    "author": "author",
    "text": "text",
    "rating": "rating",
    "votes": "votes",
    "verified": "verified",
    "title": "title",
    "category": "category",
}

_TRUE_VALUES = {"true", "1", "yes", "y", "t"}


class ReviewLoader:
    """
    Loads reviews from tabular files.

    Missing text becomes "", missing votes None and a missing verified
    flag False. Rows whose rating is absent or outside 1-5 are skipped.
    """

    def __init__(self, columns: Optional[Dict[str, str]] = None):
        """
        Initialize loader.

        Args:
            columns: Review field -> source column name overrides
        """
        self.columns = {**DEFAULT_COLUMNS, **(columns or {})}

    def load(self, path: str) -> List[Review]:
        """
        Load reviews from a .csv, .json or .jsonl file.

        Args:
            path: Input file path

        Returns:
            List of Review objects in file order
        """
        file_path = Path(path)
        suffix = file_path.suffix.lower()

        if suffix == ".csv":
            df = pd.read_csv(file_path)
        elif suffix == ".jsonl":
            df = pd.read_json(file_path, lines=True)
        elif suffix == ".json":
            df = pd.read_json(file_path)
        else:
            raise ValueError(f"Unsupported input format: {suffix} (expected .csv, .json or .jsonl)")

        logger.info(f"Read {len(df)} rows from {file_path}")
        return self.from_dataframe(df)

    def from_dataframe(self, df: pd.DataFrame) -> List[Review]:
        """Convert a DataFrame of raw records into Review objects."""
        cols = self.columns
        if cols["rating"] not in df.columns:
            raise ValueError(f"Input has no rating column '{cols['rating']}'")

        reviews = []
        skipped = 0
        for position, row in enumerate(df.to_dict(orient="records")):
            rating = _as_int(row.get(cols["rating"]))
            if rating is None or not 1 <= rating <= 5:
                logger.warning(f"Skipping row {position}: invalid rating {row.get(cols['rating'])!r}")
                skipped += 1
                continue

            review_id = _as_str(row.get(cols["review_id"])) or str(position)
            votes = _as_int(row.get(cols["votes"]))

            reviews.append(Review(
                review_id=review_id,
                author=_as_str(row.get(cols["author"])) or "",
                text=_as_str(row.get(cols["text"])) or "",
                rating=rating,
                votes=votes if votes is None or votes >= 0 else None,
                verified=_as_bool(row.get(cols["verified"])),
                title=_as_str(row.get(cols["title"])),
                category=_as_str(row.get(cols["category"]))
            ))

        logger.info(f"Loaded {len(reviews)} reviews ({skipped} skipped)")
        return reviews

    def sample_reviews(self, count: int = 60) -> List[Review]:
        """
        Generate deterministic synthetic reviews.

        A handful of authors write several reviews each, covering a few
        recurring themes with mixed polarity and some empty texts.
        """
        templates = [
            ("Great sound quality, the bass is excellent and clear.", 5),
            ("Sound is terrible, distorted bass and a bad speaker.", 1),
            ("Battery life is poor, the battery dies after two hours.", 2),
            ("Love the long battery life, charges fast too!", 5),
            ("Setup was easy and the app works great.", 4),
            ("The app keeps crashing during setup. Frustrating!!", 1),
            ("Alexa understands my voice commands well, very responsive.", 4),
            ("Voice recognition is awful, it ignores every command.", 2),
            ("Good value for the price, nice gift for my mom.", 5),
            ("Broke after 3 weeks, cheap plastic, waste of money.", 1),
            ("", 3),
            ("It works.", 3),
        ]
        authors = [f"customer_{i}" for i in range(count // 3 or 1)]

        reviews = []
        for i in range(count):
            text, rating = templates[i % len(templates)]
            variations = [
                text,
                text.upper(),
                f"{text} Would recommend." if rating >= 4 else f"{text} Returning it.",
            ]
            reviews.append(Review(
                review_id=f"sample-{i:04d}",
                author=authors[i % len(authors)],
                text=variations[i % len(variations)] if text else "",
                rating=rating,
                votes=i % 7 if i % 4 else None,
                verified=i % 5 != 0
            ))

        logger.info(f"Generated {len(reviews)} sample reviews")
        return reviews


def _is_missing(value) -> bool:
    if value is None:
        return True
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def _as_str(value) -> Optional[str]:
    if _is_missing(value):
        return None
    return str(value)


def _as_int(value) -> Optional[int]:
    if _is_missing(value):
        return None
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return None


def _as_bool(value) -> bool:
    if _is_missing(value):
        return False
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_VALUES
    return bool(value)
