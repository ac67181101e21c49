"""
Storage utility.

Exports pipeline results as CSV/JSON reports for plotting and review.
Reports are write-only; the pipeline never reads them back.
"""

import json
import logging
import os
from datetime import datetime, timezone
from typing import List, Optional

import pandas as pd

logger = logging.getLogger(__name__)


class ReportWriter:
    """
    Writes one run's results into an output directory.

    Files:
    - term_frequencies_<snapshot>.csv
    - sentiment_by_author.csv, sentiment_by_rating.csv
    - topic_candidates.csv, topics.json
    - scored_reviews.csv
    - run_metadata.json
    """

    def __init__(self, output_dir: str):
        """
        Initialize report writer.

        Args:
            output_dir: Directory for report files (created if missing)
        """
        self.output_dir = output_dir
        os.makedirs(self.output_dir, exist_ok=True)

        logger.info(f"Initialized ReportWriter with output_dir={output_dir}")

    def write(self, result, top_frequency: Optional[int] = None) -> List[str]:
        """
        Write every report for a PipelineResult.

        Args:
            result: PipelineResult from the orchestrator
            top_frequency: Terms kept per frequency table
                           (defaults to the run's own setting)

        Returns:
            Paths of the written files
        """
        paths = []
        if top_frequency is None:
            top_frequency = result.top_frequency

        for name, table in result.frequencies.items():
            paths.append(self._write_csv(
                table.to_dataframe(top_frequency), f"term_frequencies_{name}.csv"
            ))

        sentiment_df = pd.DataFrame(
            [entry.to_dict() for entry in result.sentiment.values()],
            columns=["author", "positive", "negative", "documents", "score"]
        )
        paths.append(self._write_csv(sentiment_df, "sentiment_by_author.csv"))
        paths.append(self._write_csv(result.sentiment_by_rating, "sentiment_by_rating.csv"))

        candidates_df = pd.DataFrame(result.topics.scores, columns=["k", "perplexity"])
        candidates_df["selected"] = candidates_df["k"] == result.topics.selected_k
        paths.append(self._write_csv(candidates_df, "topic_candidates.csv"))

        paths.append(self._write_json(
            {
                "selected_k": result.topics.selected_k,
                "topics": [s.to_dict() for s in result.topics.summaries],
            },
            "topics.json"
        ))

        scored_df = pd.DataFrame(
            [r.to_dict() for r in result.scored_reviews],
            columns=["review_id", "author", "rating", "verified", "score", "topic_id"]
        )
        paths.append(self._write_csv(scored_df, "scored_reviews.csv"))

        metadata = dict(result.metadata)
        metadata["generated_at"] = datetime.now(timezone.utc).isoformat()
        paths.append(self._write_json(metadata, "run_metadata.json"))

        logger.info(f"Wrote {len(paths)} reports to {self.output_dir}")
        return paths

    def _write_csv(self, df: pd.DataFrame, filename: str) -> str:
        filepath = os.path.join(self.output_dir, filename)
        try:
            df.to_csv(filepath, index=False)
            logger.debug(f"Saved {len(df)} rows to {filepath}")
        except Exception as e:
            logger.error(f"Failed to save {filepath}: {e}")
            raise
        return filepath

    def _write_json(self, data: dict, filename: str) -> str:
        filepath = os.path.join(self.output_dir, filename)
        try:
            with open(filepath, 'w') as f:
                json.dump(data, f, indent=2)
            logger.debug(f"Saved {filepath}")
        except Exception as e:
            logger.error(f"Failed to save {filepath}: {e}")
            raise
        return filepath
