"""
Model and pipeline catalog.

Fixed table of the generation models and the image/video pipeline
combinations built from them, with their estimated cost and latency.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_UP
from enum import Enum
from typing import Dict, List, Optional


class ContentType(Enum):
    """Kinds of content an operator can generate."""
    PRODUCT_GIF = "product_gif"
    LIFESTYLE_CLIP = "lifestyle_clip"
    AD_VIDEO = "ad_video"
    SOCIAL_SHORT = "social_short"
    PRODUCT_SHOT = "product_shot"
    DESIGN_CONCEPT = "design_concept"

    @property
    def is_video(self) -> bool:
        return self in _VIDEO_CONTENT_TYPES


_VIDEO_CONTENT_TYPES = frozenset({
    ContentType.PRODUCT_GIF,
    ContentType.LIFESTYLE_CLIP,
    ContentType.AD_VIDEO,
    ContentType.SOCIAL_SHORT,
})


@dataclass(frozen=True)
class ModelSpec:
    """A provider model and its typical cost per call."""
    key: str
    model_id: str
    name: str
    description: str
    avg_cost_cents: Decimal
    avg_latency_ms: int


@dataclass(frozen=True)
class PipelineSpec:
    """An image model optionally chained into a video model."""
    id: str
    image_model: str
    video_model: Optional[str]
    name: str
    best_for: str
    estimated_cost_cents: int
    estimated_latency_ms: int


@dataclass(frozen=True)
class PipelineCatalog:
    """Fixed catalog of supported pipelines."""
    pipelines: Dict[str, PipelineSpec]

    def get_pipeline(self, pipeline_id: str) -> PipelineSpec:
        """Get a pipeline by id.

        Raises:
            ValueError: If the pipeline is not in the catalog
        """
        if pipeline_id not in self.pipelines:
            raise ValueError(f"Unknown pipeline: {pipeline_id}")
        return self.pipelines[pipeline_id]


def _models(*specs: ModelSpec) -> Dict[str, ModelSpec]:
    return {spec.key: spec for spec in specs}


IMAGE_MODELS = _models(
    ModelSpec("nano-banana", "nexa/nano-banana", "Nano Banana",
              "Primary image model - fast and cost-effective", Decimal("2"), 3000),
    ModelSpec("gpt-image", "openai/gpt-image-1", "GPT Image",
              "OpenAI image generation - high quality", Decimal("4"), 5000),
)

VIDEO_MODELS = _models(
    ModelSpec("nano-banana-video", "nexa/nano-banana", "Nano Banana Video",
              "For GIFs/short clips from its own images", Decimal("5"), 8000),
    ModelSpec("veo3", "google/veo-3", "VEO 3",
              "Google video model - longer clips, high quality", Decimal("15"), 15000),
    ModelSpec("sora2", "openai/sora-2", "Sora 2",
              "OpenAI video - dynamic motion, lifestyle", Decimal("20"), 20000),
)

COPY_MODELS = _models(
    ModelSpec("claude", "anthropic/claude-sonnet-4", "Claude Sonnet",
              "Best for brand voice consistency", Decimal("1"), 2000),
    ModelSpec("gpt", "openai/gpt-4o", "GPT-4o",
              "Strong alternative for copy", Decimal("2"), 2500),
    ModelSpec("deepseek", "deepseek/deepseek-chat", "DeepSeek",
              "Cost-effective option for volume", Decimal("0.5"), 1500),
)

PIPELINE_CATALOG = PipelineCatalog({p.id: p for p in [
    PipelineSpec("nb-nb", "nano-banana", "nano-banana-video", "Nano Banana Full Stack",
                 "GIFs, short loops, product animations", 7, 11000),
    PipelineSpec("nb-veo3", "nano-banana", "veo3", "Nano Banana + VEO 3",
                 "Longer clips, cinematic quality", 17, 18000),
    PipelineSpec("nb-sora2", "nano-banana", "sora2", "Nano Banana + Sora 2",
                 "Dynamic motion, lifestyle content", 22, 23000),
    PipelineSpec("gpt-nb", "gpt-image", "nano-banana-video", "GPT Image + Nano Video",
                 "GIFs from high-quality GPT images", 9, 13000),
    PipelineSpec("gpt-veo3", "gpt-image", "veo3", "GPT Image + VEO 3",
                 "Premium video from GPT images", 19, 20000),
    PipelineSpec("gpt-sora2", "gpt-image", "sora2", "OpenAI Full Stack",
                 "Highest quality, full OpenAI pipeline", 24, 25000),
    PipelineSpec("nano-banana-only", "nano-banana", None, "Nano Banana (Static)",
                 "Product shots, design concepts", 2, 3000),
    PipelineSpec("gpt-image-only", "gpt-image", None, "GPT Image (Static)",
                 "High-quality product shots", 4, 5000),
]})

CONTENT_PIPELINE_MAP: Dict[ContentType, List[str]] = {
    ContentType.PRODUCT_GIF: ["nb-nb", "gpt-nb"],
    ContentType.LIFESTYLE_CLIP: ["nb-veo3", "gpt-veo3", "nb-sora2"],
    ContentType.AD_VIDEO: ["nb-sora2", "gpt-sora2", "nb-veo3"],
    ContentType.SOCIAL_SHORT: ["nb-nb", "nb-sora2"],
    ContentType.PRODUCT_SHOT: ["nano-banana-only", "gpt-image-only"],
    ContentType.DESIGN_CONCEPT: ["nano-banana-only", "gpt-image-only"],
}


def get_pipeline(pipeline_id: str) -> PipelineSpec:
    return PIPELINE_CATALOG.get_pipeline(pipeline_id)


def pipelines_for_content_type(content_type: ContentType) -> List[PipelineSpec]:
    """Catalog pipelines suited to a content type, in preference order."""
    return [
        PIPELINE_CATALOG.pipelines[pipeline_id]
        for pipeline_id in CONTENT_PIPELINE_MAP.get(content_type, [])
        if pipeline_id in PIPELINE_CATALOG.pipelines
    ]


def get_image_model(key: str) -> ModelSpec:
    """Get an image model by key.

    Raises:
        ValueError: If the model is not supported
    """
    if key not in IMAGE_MODELS:
        raise ValueError(f"Unsupported image model: {key}")
    return IMAGE_MODELS[key]


def get_copy_model(key: str) -> ModelSpec:
    """Get a copy model by key.

    Raises:
        ValueError: If the model is not supported
    """
    if key not in COPY_MODELS:
        raise ValueError(f"Unsupported copy model: {key}")
    return COPY_MODELS[key]


def to_whole_cents(amount_cents: Decimal) -> int:
    """Convert a possibly fractional cent amount to whole cents, rounding UP."""
    return int(Decimal(amount_cents).quantize(Decimal("1"), rounding=ROUND_UP))
