"""
Budget-aware OpenRouter client for copy and static images.

Checks the monthly budget before each call and records the generation
afterwards.
"""

import logging
import os
import re
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from openai import OpenAI

from ..core.budget import BudgetExhaustedError
from ..core.pipelines import (
    ContentType,
    get_copy_model,
    get_image_model,
    get_pipeline,
    to_whole_cents,
)
from ..core.store import BudgetStore

logger = logging.getLogger(__name__)

OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"
DEFAULT_APP_URL = "https://tmh-ai-content-engine.vercel.app"
APP_TITLE = "TMH AI Content Engine"

_URL_PATTERN = re.compile(r"https?://[^\s)\"']+")


@dataclass(frozen=True)
class CopyResult:
    """Generated text plus what it cost."""
    text: str
    generation_id: str
    cost_cents: int
    latency_ms: float
    response: Any


@dataclass(frozen=True)
class ImageResult:
    """Generated image URL plus what it cost."""
    url: str
    pipeline_id: str
    generation_id: str
    cost_cents: int
    latency_ms: float
    response: Any


class GuardedOpenRouter:
    """OpenRouter chat client that records every generation in a BudgetStore.

    All failures are loud: provider and storage errors propagate unchanged.
    """

    def __init__(
        self,
        store: BudgetStore,
        model_key: str = "claude",
        api_key: Optional[str] = None,
    ):
        """Initialize the client.

        Args:
            store: Store that receives the generation records
            model_key: Key into the copy model catalog
            api_key: OpenRouter key (defaults to $OPENROUTER_API_KEY)

        Raises:
            ValueError: If the model is unknown or the key is missing
        """
        self.model = get_copy_model(model_key)
        self.store = store

        api_key = api_key or os.environ.get("OPENROUTER_API_KEY", "")
        if not api_key:
            raise ValueError("OPENROUTER_API_KEY is not configured")

        self.client = OpenAI(
            api_key=api_key,
            base_url=OPENROUTER_BASE_URL,
            default_headers={
                "HTTP-Referer": os.environ.get("NEXT_PUBLIC_APP_URL", DEFAULT_APP_URL),
                "X-Title": APP_TITLE,
            },
        )

    def generate_copy(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        content_type: Optional[str] = None,
        city_id: Optional[str] = None,
        max_tokens: int = 2000,
        temperature: float = 0.7,
        **kwargs: Any
    ) -> CopyResult:
        """Generate text and record the generation.

        Args:
            prompt: User prompt (required)
            system_prompt: Optional system message
            content_type: Classification tag stored on the record
            city_id: Classification tag stored on the record
            max_tokens: Maximum tokens to generate
            temperature: Sampling temperature
            **kwargs: Additional chat completion parameters

        Returns:
            CopyResult with the text and the generation id

        Raises:
            ValueError: If prompt is empty
            BudgetExhaustedError: If this month's budget is spent
        """
        if not prompt or not prompt.strip():
            raise ValueError("prompt is required and cannot be empty")

        self._check_budget()

        messages: List[Dict[str, str]] = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        start = time.monotonic()
        response = self.client.chat.completions.create(
            model=self.model.model_id,
            messages=messages,
            max_tokens=max_tokens,
            temperature=temperature,
            **kwargs
        )
        latency_ms = (time.monotonic() - start) * 1000

        text = ""
        if response.choices:
            text = response.choices[0].message.content or ""

        cost_cents = to_whole_cents(self.model.avg_cost_cents)
        generation_id = self.store.record_generation(
            pipeline_id=self.model.key,
            pipeline_name=self.model.name,
            cost_cents=cost_cents,
            latency_ms=latency_ms,
            content_type=content_type,
            city_id=city_id,
        )
        logger.info(
            "Recorded %s generation %s (%d cents, %.0f ms)",
            self.model.key, generation_id, cost_cents, latency_ms,
        )

        return CopyResult(
            text=text,
            generation_id=generation_id,
            cost_cents=cost_cents,
            latency_ms=latency_ms,
            response=response,
        )

    def generate_image(
        self,
        prompt: str,
        model_key: str = "nano-banana",
        content_type: Optional[str] = ContentType.PRODUCT_SHOT.value,
        city_id: Optional[str] = None,
        temperature: float = 0.7,
        **kwargs: Any
    ) -> ImageResult:
        """Generate a static image and record it under the model's image-only pipeline.

        The provider answers with message content that holds the image URL;
        the first http(s) URL in it is returned, or the whole content if
        there is none.

        Args:
            prompt: Image prompt (required)
            model_key: Key into the image model catalog
            content_type: Classification tag stored on the record
            city_id: Classification tag stored on the record
            temperature: Sampling temperature
            **kwargs: Additional chat completion parameters

        Returns:
            ImageResult with the URL and the generation id

        Raises:
            ValueError: If prompt is empty, the model is unknown or the
                content type needs a video pipeline
            BudgetExhaustedError: If this month's budget is spent
        """
        if not prompt or not prompt.strip():
            raise ValueError("prompt is required and cannot be empty")
        model = get_image_model(model_key)
        pipeline = get_pipeline(f"{model.key}-only")
        if content_type is not None and ContentType(content_type).is_video:
            raise ValueError(f"{content_type} needs a video pipeline, not a static image")

        self._check_budget()

        start = time.monotonic()
        response = self.client.chat.completions.create(
            model=model.model_id,
            messages=[{"role": "user", "content": [{"type": "text", "text": prompt}]}],
            max_tokens=1,
            temperature=temperature,
            **kwargs
        )
        latency_ms = (time.monotonic() - start) * 1000

        content = ""
        if response.choices:
            content = response.choices[0].message.content or ""
        match = _URL_PATTERN.search(content)
        url = match.group(0) if match else content

        cost_cents = to_whole_cents(model.avg_cost_cents)
        generation_id = self.store.record_generation(
            pipeline_id=pipeline.id,
            pipeline_name=pipeline.name,
            cost_cents=cost_cents,
            latency_ms=latency_ms,
            content_type=content_type,
            city_id=city_id,
        )
        logger.info(
            "Recorded %s generation %s (%d cents, %.0f ms)",
            pipeline.id, generation_id, cost_cents, latency_ms,
        )

        return ImageResult(
            url=url,
            pipeline_id=pipeline.id,
            generation_id=generation_id,
            cost_cents=cost_cents,
            latency_ms=latency_ms,
            response=response,
        )

    def _check_budget(self) -> None:
        status = self.store.get_budget_status()
        if not status.can_generate:
            raise BudgetExhaustedError(
                f"Monthly budget of {status.total_budget_cents} cents is spent", status
            )
