"""
ReviewLens - Review Vocabulary, Sentiment and Topic Analysis

CLI entry point for running the analysis pipeline.
"""

import argparse
import logging
import sys

from reviewlens.errors import ConfigurationError
from reviewlens.orchestrator import PipelineOrchestrator
from reviewlens.stages.ingestion import ReviewLoader
from reviewlens.utils.storage import ReportWriter
import config.settings as settings


def setup_logging(log_level: str = "INFO"):
    """Configure logging for the entire application."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format=settings.LOG_FORMAT,
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler(settings.LOG_FILE)
        ]
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="ReviewLens - Review Vocabulary, Sentiment and Topic Analysis",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Analyze a CSV export of reviews
  python main.py --input data/reviews.csv

  # Add domain stopwords and weigh negative terms 3x
  python main.py --input data/reviews.csv \\
                 --domain-stopwords echo,alexa,speaker \\
                 --negative-weight 3

  # Sweep 2..8 topics and keep 6 regardless of the elbow
  python main.py --input data/reviews.csv --k-max 8 --fixed-k 6

  # Run on generated sample reviews
  python main.py --sample

Note: Set GOOGLE_API_KEY to use --label-topics.
        """
    )

    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--input",
        help="Reviews file (.csv, .json or .jsonl)"
    )
    source.add_argument(
        "--sample",
        action="store_true",
        help="Use generated sample reviews instead of an input file"
    )

    parser.add_argument(
        "--output-dir",
        default=str(settings.OUTPUT_ROOT),
        help=f"Report directory (default: {settings.OUTPUT_ROOT})"
    )

    parser.add_argument(
        "--domain-stopwords",
        help="Comma-separated domain noise terms (default: settings.DOMAIN_STOPWORDS)"
    )

    parser.add_argument(
        "--lexicon",
        help="Polarity lexicon file (CSV word,sentiment or JSON). Default: Bing lexicon from NLTK"
    )

    parser.add_argument(
        "--negative-weight",
        type=float,
        default=settings.NEGATIVE_WEIGHT,
        help=f"Weight of negative terms (default: {settings.NEGATIVE_WEIGHT})"
    )

    parser.add_argument(
        "--k-min",
        type=int,
        default=settings.TOPIC_K_MIN,
        help=f"Smallest candidate topic count (default: {settings.TOPIC_K_MIN})"
    )

    parser.add_argument(
        "--k-max",
        type=int,
        default=settings.TOPIC_K_MAX,
        help=f"Largest candidate topic count (default: {settings.TOPIC_K_MAX})"
    )

    parser.add_argument(
        "--fixed-k",
        type=int,
        help="Use this topic count instead of the elbow rule"
    )

    parser.add_argument(
        "--elbow-threshold",
        type=float,
        default=settings.ELBOW_RELATIVE_THRESHOLD,
        help=f"Elbow threshold as a share of the score range (default: {settings.ELBOW_RELATIVE_THRESHOLD})"
    )

    parser.add_argument(
        "--holdout-fraction",
        type=float,
        default=settings.HOLDOUT_FRACTION,
        help=f"Share of documents held out for perplexity (default: {settings.HOLDOUT_FRACTION})"
    )

    parser.add_argument(
        "--top-terms",
        type=int,
        default=settings.TOPIC_TOP_TERMS,
        help=f"Terms per topic summary (default: {settings.TOPIC_TOP_TERMS})"
    )

    parser.add_argument(
        "--top-frequency",
        type=int,
        default=settings.FREQUENCY_TOP_TERMS,
        help=f"Terms per frequency report (default: {settings.FREQUENCY_TOP_TERMS})"
    )

    parser.add_argument(
        "--seed",
        type=int,
        default=settings.RANDOM_SEED,
        help=f"Random seed for topic fitting (default: {settings.RANDOM_SEED})"
    )

    parser.add_argument(
        "--n-jobs",
        type=int,
        default=settings.TOPIC_N_JOBS,
        help=f"Topic models fitted concurrently (default: {settings.TOPIC_N_JOBS})"
    )

    parser.add_argument(
        "--label-topics",
        action="store_true",
        help="Ask Gemini for a human-readable label per topic"
    )

    parser.add_argument(
        "--log-level",
        default=settings.LOG_LEVEL,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help=f"Logging level (default: {settings.LOG_LEVEL})"
    )

    return parser


def main():
    """Main CLI entry point."""
    args = build_parser().parse_args()

    setup_logging(args.log_level)
    logger = logging.getLogger(__name__)

    domain_stopwords = None
    if args.domain_stopwords is not None:
        domain_stopwords = [t.strip() for t in args.domain_stopwords.split(",") if t.strip()]

    print("=" * 60)
    print("ReviewLens - Review Vocabulary, Sentiment and Topic Analysis")
    print("=" * 60)
    print(f"Input: {'sample reviews' if args.sample else args.input}")
    print(f"Topic range: {args.k_min}..{args.k_max}")
    print(f"Negative weight: {args.negative_weight}")
    print(f"Seed: {args.seed}")
    print("=" * 60)
    print()

    try:
        loader = ReviewLoader()
        reviews = loader.sample_reviews() if args.sample else loader.load(args.input)

        orchestrator = PipelineOrchestrator.from_settings(
            domain_stopwords=domain_stopwords,
            lexicon_path=args.lexicon,
            negative_weight=args.negative_weight,
            k_min=args.k_min,
            k_max=args.k_max,
            top_terms=args.top_terms,
            seed=args.seed,
            elbow_threshold=args.elbow_threshold,
            fixed_k=args.fixed_k,
            holdout_fraction=args.holdout_fraction,
            n_jobs=args.n_jobs,
            label_topics=args.label_topics,
            top_frequency=args.top_frequency
        )

        result = orchestrator.run(reviews)
        paths = ReportWriter(args.output_dir).write(result, top_frequency=args.top_frequency)

        print()
        print("=" * 60)
        print(f"Top terms: {', '.join(t for t, _ in result.top_terms(n=10))}")
        print(f"Selected topics: k={result.topics.selected_k}")
        for summary in result.topics.summaries:
            label = f" [{summary.label}]" if summary.label else ""
            print(f"  Topic {summary.topic_id}{label}: {', '.join(summary.terms)}")
        print("=" * 60)
        print(f"Reports: {args.output_dir} ({len(paths)} files)")
        print("=" * 60)

        logger.info("ReviewLens completed successfully")
        sys.exit(0)

    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        print(f"\nConfiguration error: {e}")
        sys.exit(1)

    except KeyboardInterrupt:
        logger.warning("Pipeline interrupted by user")
        print("\nPipeline interrupted")
        sys.exit(1)

    except Exception as e:
        logger.error(f"Pipeline failed: {e}", exc_info=True)
        print(f"\nPipeline failed: {e}")
        print(f"Check {settings.LOG_FILE} for details")
        sys.exit(1)


if __name__ == "__main__":
    main()
