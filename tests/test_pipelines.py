"""
Tests for the model and pipeline catalog.
"""

from decimal import Decimal

import pytest

from content_budget.core.pipelines import (
    CONTENT_PIPELINE_MAP,
    COPY_MODELS,
    IMAGE_MODELS,
    PIPELINE_CATALOG,
    VIDEO_MODELS,
    ContentType,
    get_copy_model,
    get_image_model,
    get_pipeline,
    pipelines_for_content_type,
    to_whole_cents,
)


class TestCatalog:
    """Test catalog lookups."""

    def test_get_pipeline(self):
        pipeline = get_pipeline("gpt-sora2")
        assert pipeline.name == "OpenAI Full Stack"
        assert pipeline.estimated_cost_cents == 24

    def test_unknown_pipeline(self):
        with pytest.raises(ValueError, match="Unknown pipeline: nope"):
            get_pipeline("nope")

    def test_pipelines_reference_known_models(self):
        """Every pipeline is built from catalog models."""
        for pipeline in PIPELINE_CATALOG.pipelines.values():
            assert pipeline.image_model in IMAGE_MODELS
            assert pipeline.video_model is None or pipeline.video_model in VIDEO_MODELS

    def test_content_type_mapping_order(self):
        """Pipelines come back in preference order."""
        ids = [p.id for p in pipelines_for_content_type(ContentType.AD_VIDEO)]
        assert ids == ["nb-sora2", "gpt-sora2", "nb-veo3"]

    def test_every_content_type_mapped(self):
        assert set(CONTENT_PIPELINE_MAP) == set(ContentType)

    def test_video_content_types(self):
        assert ContentType.PRODUCT_GIF.is_video
        assert not ContentType.PRODUCT_SHOT.is_video

    def test_image_models(self):
        """Every image model has a static pipeline of its own."""
        assert get_image_model("gpt-image").model_id == "openai/gpt-image-1"
        for key in IMAGE_MODELS:
            assert get_pipeline(f"{key}-only").image_model == key
        with pytest.raises(ValueError, match="Unsupported image model"):
            get_image_model("sora2")

    def test_copy_models(self):
        assert get_copy_model("deepseek").avg_cost_cents == Decimal("0.5")
        assert set(COPY_MODELS) == {"claude", "gpt", "deepseek"}
        with pytest.raises(ValueError, match="Unsupported copy model"):
            get_copy_model("llama")


class TestWholeCents:
    """Test conservative rounding to whole cents."""

    @pytest.mark.parametrize("amount, expected", [
        (Decimal("0.5"), 1),
        (Decimal("2"), 2),
        (Decimal("2.01"), 3),
        (Decimal("0"), 0),
    ])
    def test_rounds_up(self, amount, expected):
        assert to_whole_cents(amount) == expected
