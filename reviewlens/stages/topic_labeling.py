"""
Topic Labeler.

Turns a topic's top terms into a short human-readable label using an LLM.
Labeling is optional: a topic that cannot be labeled keeps label=None.
"""

import json
import logging
from typing import Optional, Sequence, Tuple

import google.generativeai as genai

from reviewlens.models.topic import TopicSummary

logger = logging.getLogger(__name__)


SYSTEM_PROMPT = """You are a product analytics assistant that names topics found in customer reviews.

Your task:
1. Read the most probable terms of one topic (already lemmatized, most probable first)
2. Write a short, human-readable label (2-5 words) describing what the reviews discuss

Rules:
- Use simple noun phrases (e.g., "Battery life", "Sound quality", "Setup difficulty")
- Base the label on the first terms more than the last ones
- Do not include sentiment words unless the terms are dominated by them
- Do not invent product names

Output valid JSON only."""


def _construct_user_prompt(summary: TopicSummary, context: str) -> str:
    """Construct user prompt from topic summary."""
    terms = ", ".join(summary.terms)
    return f"""Product context: {context}
Topic terms: {terms}

Return the label as JSON:
{{
  "label": "..."
}}"""


class TopicLabeler:
    """
    Labels topic summaries with an LLM (Gemini).
    """

    def __init__(
        self,
        api_key: str,
        model_name: str = "gemini-1.5-flash",
        temperature: float = 0.0,
        max_retries: int = 3,
        context: str = "product reviews"
    ):
        """
        Initialize topic labeler.

        Args:
            api_key: Gemini API key
            model_name: Model to use for label generation
            temperature: LLM temperature (0.0 for deterministic)
            max_retries: Attempts per topic before giving up
            context: Short description of the corpus, included in the prompt
        """
        self.model_name = model_name
        self.temperature = temperature
        self.max_retries = max_retries
        self.context = context

        genai.configure(api_key=api_key)
        self.model = genai.GenerativeModel(
            model_name=model_name,
            generation_config={
                "temperature": temperature,
                "response_mime_type": "application/json"
            },
            system_instruction=SYSTEM_PROMPT
        )

        logger.info(f"Initialized TopicLabeler with model={model_name}")

    def label(self, summary: TopicSummary) -> Optional[str]:
        """
        Generate a label for one topic.

        Returns:
            Label string, or None if every attempt failed
        """
        if not summary.terms:
            return None

        user_prompt = _construct_user_prompt(summary, self.context)

        for attempt in range(self.max_retries):
            try:
                response = self.model.generate_content(user_prompt)
                label = self._parse_llm_response(response.text)
                if label:
                    logger.debug(f"Labeled topic {summary.topic_id}: '{label}'")
                    return label
                logger.warning(
                    f"LLM response missing 'label' for topic {summary.topic_id} "
                    f"(attempt {attempt + 1})"
                )

            except json.JSONDecodeError as e:
                logger.error(f"Failed to parse LLM JSON (attempt {attempt + 1}): {e}")

            except Exception as e:
                logger.error(f"LLM API error (attempt {attempt + 1}): {e}")

        logger.warning(f"Max retries reached for topic {summary.topic_id}, leaving unlabeled")
        return None

    def label_all(self, summaries: Sequence[TopicSummary]) -> Tuple[TopicSummary, ...]:
        """Return new summaries carrying labels (None where labeling failed)."""
        labeled = tuple(s.with_label(self.label(s)) for s in summaries)
        done = sum(1 for s in labeled if s.label)
        logger.info(f"Labeled {done}/{len(labeled)} topics")
        return labeled

    @staticmethod
    def _parse_llm_response(response_text: str) -> Optional[str]:
        """
        Extract the label from a JSON response.

        Raises:
            json.JSONDecodeError: If response is not valid JSON
        """
        data = json.loads(response_text)
        if not isinstance(data, dict):
            return None
        label = str(data.get("label") or "").strip()
        return label or None
