"""LLM summarization and Q&A over aggregated field reports via AWS Bedrock."""

import json
import logging
import os
import time
from typing import Any, NamedTuple

import boto3
from botocore.exceptions import ClientError

from models.aggregation import AggregatedData
from models.api import SynthesizedSummaries
from utils.cache import ResponseCache

logger = logging.getLogger(__name__)

BEDROCK_MODEL_ID = os.environ.get(
    "BEDROCK_MODEL_ID", "us.anthropic.claude-sonnet-4-20250514-v1:0"
)

# Only the first texts are sent to keep prompts within token limits
MAX_SUMMARY_TEXTS = 50
TEXT_SEPARATOR = "\n---\n"

SUMMARY_MAX_TOKENS = 200
CHAT_MAX_TOKENS = 500

SUMMARY_SYSTEM_PROMPT = (
    "You are an expert avalanche forecaster assistant. Synthesize the following "
    "{category} observations into a brief, actionable summary. Focus on the most "
    "important patterns and safety-relevant findings. Be concise - limit to 3-4 "
    "sentences maximum."
)
SUMMARY_USER_PROMPT = (
    "Briefly summarize key themes from these {category} observations "
    "(3-4 sentences max):\n\n{texts}"
)
CHAT_SYSTEM_PROMPT = (
    "You are an expert avalanche forecaster assistant. You have access to "
    "aggregated field report data for a specific date. Answer questions "
    "accurately based on the provided data. Be concise and factual.\n\n"
    "Here is the aggregated data context:\n{context}"
)

CHAT_EMPTY_RESPONSE = "I couldn't generate a response. Please try again."
CHAT_ERROR_RESPONSE = "Error processing your question. Please try again."


class SynthesizeResult(NamedTuple):
    summary: str
    cached: bool


def _response_text(response: dict[str, Any]) -> str:
    """Join the text blocks of a Bedrock converse response."""
    content_blocks = response.get("output", {}).get("message", {}).get("content", [])
    return "\n".join(block["text"] for block in content_blocks if "text" in block)


class SummaryService:
    """Writes prose summaries of report text and answers questions about a day."""

    def __init__(
        self,
        bedrock_client=None,
        cache: ResponseCache | None = None,
        model_id: str = BEDROCK_MODEL_ID,
    ):
        """Initialize the summary service.

        Args:
            bedrock_client: bedrock-runtime client; created from the
                environment's region when omitted
            cache: Cache for generated summaries
            model_id: Bedrock model identifier
        """
        if bedrock_client is None:
            region = os.environ.get("AWS_DEFAULT_REGION", "us-west-2")
            bedrock_client = boto3.client("bedrock-runtime", region_name=region)
        self.bedrock = bedrock_client
        self.cache = cache if cache is not None else ResponseCache()
        self.model_id = model_id

    def _converse(self, system_prompt: str, user_message: str, max_tokens: int) -> str:
        response = self.bedrock.converse(
            modelId=self.model_id,
            system=[{"text": system_prompt}],
            messages=[{"role": "user", "content": [{"text": user_message}]}],
            inferenceConfig={"maxTokens": max_tokens},
        )
        return _response_text(response)

    def synthesize_summary(self, texts: list[str], category: str) -> SynthesizeResult:
        """Summarize one category of report text.

        Never raises: LLM failures come back as a fixed error message,
        which is not cached.

        Args:
            texts: Trimmed snippets for the category
            category: Display name, e.g. 'Observation'

        Returns:
            SynthesizeResult with the summary and whether it came from cache
        """
        label = category.lower()
        logger.info("Synthesizing %s summary from %d texts", category, len(texts))

        if not texts:
            return SynthesizeResult(f"No {label} data available for this date.", False)

        combined_text = TEXT_SEPARATOR.join(texts[:MAX_SUMMARY_TEXTS])
        cache_key = self.cache.hash_payload(
            {"type": "synthesize", "category": category, "texts": combined_text}
        )

        cached = self.cache.get(cache_key)
        if cached:
            logger.info("Using cached %s summary", category)
            return SynthesizeResult(cached, True)

        try:
            start = time.time()
            summary = self._converse(
                SUMMARY_SYSTEM_PROMPT.format(category=category),
                SUMMARY_USER_PROMPT.format(category=category, texts=combined_text),
                SUMMARY_MAX_TOKENS,
            )
            elapsed_ms = (time.time() - start) * 1000
        except ClientError as e:
            logger.error(
                "Bedrock error synthesizing %s summary: %s",
                category,
                e.response.get("Error", {}).get("Code"),
            )
            return SynthesizeResult(
                f"Error generating {label} summary. Please try again.", False
            )
        except Exception as e:
            logger.error("Error synthesizing %s summary: %s", category, e)
            return SynthesizeResult(
                f"Error generating {label} summary. Please try again.", False
            )

        if not summary:
            return SynthesizeResult(f"Unable to synthesize {label} summary.", False)

        logger.info(
            "%s summary generated in %.0fms (%d chars)",
            category,
            elapsed_ms,
            len(summary),
        )
        self.cache.set(cache_key, summary)
        return SynthesizeResult(summary, False)

    def chat_with_context(
        self,
        message: str,
        context: AggregatedData | None = None,
        summaries: SynthesizedSummaries | None = None,
    ) -> str:
        """Answer a question grounded in a day's aggregated data."""
        context_json = json.dumps(
            {
                "aggregatedData": context.model_dump(by_alias=True) if context else None,
                "summaries": summaries.model_dump(by_alias=True) if summaries else None,
            },
            indent=2,
        )

        try:
            answer = self._converse(
                CHAT_SYSTEM_PROMPT.format(context=context_json),
                message,
                CHAT_MAX_TOKENS,
            )
        except Exception as e:
            logger.error("Chat error: %s", e)
            return CHAT_ERROR_RESPONSE

        return answer or CHAT_EMPTY_RESPONSE
