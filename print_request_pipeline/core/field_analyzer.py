"""
Gemini field extractor for printing request emails.

Asks the model what is being printed and who is printing it, and
validates the JSON it returns.
"""

import asyncio
import json
import logging
import re
from typing import Any, List, Optional, Sequence

import google.generativeai as genai

from ..errors import ConfigurationError
from .models import AIExtractionResult, AnalysisResult, AnalyzedEmailRecord, EmailRecord

logger = logging.getLogger(__name__)


EXTRACTION_PROMPT = """
You are a precise parser.

Analyze the following printing request email:

"{content}"

Extract the following two fields:
1. What is being printed
2. Who is requesting the printing

Return ONLY raw JSON.

Respond exactly like this:
{{
  "whatIsBeingPrinted": "...",
  "whoIsPrinting": "..."
}}

responses should never be longer than 200 characters long.
"""

# Only a leading ```json and a trailing ``` are removed
_CODE_FENCE = re.compile(r"^```json\s*|```$")


def build_extraction_prompt(content: str) -> str:
    """Embed email content verbatim in the extraction prompt."""
    return EXTRACTION_PROMPT.format(content=content)


def strip_code_fence(text: str) -> str:
    """Remove a Markdown ```json ... ``` wrapper if the model added one."""
    return _CODE_FENCE.sub("", text.strip()).strip()


class FieldAnalyzer:
    """
    Extracts `whatIsBeingPrinted` and `whoIsPrinting` from email content.

    Failures never raise; they come back as unsuccessful AnalysisResults.
    """

    def __init__(
        self,
        api_key: Optional[str],
        model_name: Optional[str],
        temperature: float = 0.2,
        max_output_tokens: int = 400,
        max_concurrent: int = 10,
        model: Any = None
    ):
        """
        Initialize analyzer with Gemini API.

        Args:
            api_key: Gemini API key
            model_name: Gemini model identifier
            temperature: Generation temperature
            max_output_tokens: Maximum tokens in response
            max_concurrent: Maximum in-flight model calls in a batch
            model: Pre-built model exposing generate_content (skips API setup)

        Raises:
            ConfigurationError: if the model name or API key is missing, or max_concurrent is below 1
        """
        if not model_name:
            raise ConfigurationError("GEMINI_MODEL_NAME is not defined, please define it and try again")
        if max_concurrent < 1:
            raise ConfigurationError(f"max_concurrent must be at least 1, got {max_concurrent}")
        self.model_name = model_name
        self.max_concurrent = max_concurrent

        if model is None:
            if not api_key:
                raise ConfigurationError("GEMINI_API_KEY is not defined, please define it and try again")
            genai.configure(api_key=api_key)
            model = genai.GenerativeModel(
                model_name=model_name,
                generation_config=genai.GenerationConfig(
                    temperature=temperature,
                    max_output_tokens=max_output_tokens
                )
            )

        self.model = model
        logger.info(f"FieldAnalyzer initialized with model: {model_name}")

    async def extract_fields(self, email: EmailRecord) -> AnalysisResult:
        """
        Extract the printing fields from one email.

        Emails without content are skipped without calling the model.
        """
        if not email.content:
            return AnalysisResult(email_id=email.id, success=False, error="no content")

        result_text = None
        try:
            response = await asyncio.to_thread(
                self.model.generate_content,
                build_extraction_prompt(email.content)
            )
            result_text = strip_code_fence(response.text)
            parsed = AIExtractionResult.model_validate(json.loads(result_text))

            return AnalysisResult(
                email_id=email.id,
                success=True,
                what_is_being_printed=parsed.what_is_being_printed,
                who_is_printing=parsed.who_is_printing,
                raw_response=result_text
            )

        except Exception as e:
            logger.error(f"Error processing email {email.id}: {e}")
            return AnalysisResult(
                email_id=email.id,
                success=False,
                error=str(e),
                raw_response=result_text
            )

    async def analyze(self, email: EmailRecord) -> AnalyzedEmailRecord:
        """Analyze one email; failed extractions leave both fields None."""
        result = await self.extract_fields(email)
        return result.to_record(email)

    async def extract_batch(self, emails: Sequence[EmailRecord]) -> List[AnalysisResult]:
        """
        Extract fields for many emails concurrently.

        Results are in input order. At most ``max_concurrent`` model calls
        are in flight at once.
        """
        semaphore = asyncio.Semaphore(self.max_concurrent)

        async def extract_with_semaphore(email: EmailRecord) -> AnalysisResult:
            async with semaphore:
                return await self.extract_fields(email)

        results = await asyncio.gather(
            *(extract_with_semaphore(email) for email in emails),
            return_exceptions=True
        )

        processed_results = []
        for email, result in zip(emails, results):
            if isinstance(result, Exception):
                logger.error(f"Error processing email {email.id}: {result}")
                processed_results.append(AnalysisResult(
                    email_id=email.id,
                    success=False,
                    error=str(result)
                ))
            else:
                processed_results.append(result)

        successful = sum(1 for r in processed_results if r.success)
        logger.info(f"Batch analysis complete: {successful}/{len(emails)} successful")

        return processed_results

    async def analyze_all(self, emails: Sequence[EmailRecord]) -> List[AnalyzedEmailRecord]:
        """Analyze many emails; same length and order as the input."""
        results = await self.extract_batch(emails)
        return [result.to_record(email) for email, result in zip(emails, results)]
