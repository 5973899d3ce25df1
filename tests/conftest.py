# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - Scripted fakes for the model, object store and HTTP transport
# - A pipeline factory wired entirely from fakes (no network)
# =============================================================================

import os

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("OPENAI_API_KEY", "test-openai-key")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

import random

import httpx
import pytest

from agents.color_analyst import ColorAnalystAgent
from agents.fallback import FallbackGenerator
from agents.palette_stylist import PaletteStylistAgent
from agents.pipeline import PhotoAnalysisPipeline
from core.services.upload_service import ImageFile, UploadRetrier
from lib.monitoring import ErrorLogger, PerformanceTracker

MIB = 1024 * 1024
PUBLIC_URL = "https://test-project.supabase.co/storage/v1/object/public/photos/me.jpg"


# =============================================================================
# Fakes
# =============================================================================

class ScriptedModel:
    """
    StructuredModel that replays a script.

    Each entry is either a dict (returned) or an exception (raised).
    Every call is recorded in `calls`.
    """

    def __init__(self, *script):
        self.script = list(script)
        self.calls = []

    def generate(self, messages, schema, schema_name):
        self.calls.append({"messages": messages, "schema": schema, "schema_name": schema_name})
        if not self.script:
            raise AssertionError(f"Unexpected model call: {schema_name}")
        step = self.script.pop(0)
        if isinstance(step, BaseException):
            raise step
        return step


class FlakyStore:
    """ObjectStore that fails `failures` times, then returns `url`."""

    def __init__(self, failures=0, url=PUBLIC_URL):
        self.failures = failures
        self.url = url
        self.calls = []

    def upload(self, content, path, content_type=None, upsert=True):
        self.calls.append(path)
        if len(self.calls) <= self.failures:
            raise ConnectionError(f"storage unavailable (call {len(self.calls)})")
        return self.url


def color(name, hex_value, category=None):
    data = {"name": name, "hex": hex_value, "description": f"{name} works well"}
    if category:
        data["category"] = category
    return data


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def basic_response():
    """A complete, well-formed primary analysis response."""
    return {
        "skinTone": "Warm golden undertones with medium depth",
        "season": "Autumn",
        "freeColors": [
            color("Burnt Orange", "#CC5500"),
            color("Olive Green", "#808000"),
            color("Deep Teal", "#014D4E"),
        ],
        "recommendations": [
            "Wear earthy tones near your face",
            "Choose gold over silver jewelry",
            "Avoid icy pastels",
        ],
    }


@pytest.fixture
def enhanced_response():
    """A complete enrichment response meeting every minimum."""
    categories = ["neutral", "accent", "statement", "soft"]
    return {
        "premiumColors": [
            color(f"Autumn Color {i}", f"#{i * 10:02X}4020", categories[i % 4])
            for i in range(20)
        ],
        "makeupTips": [f"Makeup tip {i}" for i in range(8)],
        "wardrobeGuide": [f"Wardrobe tip {i}" for i in range(10)],
        "seasonalDetails": {
            "description": "Rich, warm and muted",
            "characteristics": [f"Trait {i}" for i in range(5)],
            "avoidColors": [f"Avoid {i}" for i in range(5)],
        },
    }


@pytest.fixture
def jpeg_file():
    """A 2 MiB JPEG held in memory."""
    return ImageFile(filename="me.jpg", content=b"\xff" * (2 * MIB), content_type="image/jpeg")


@pytest.fixture
def sleeps():
    """Records requested sleep durations instead of sleeping."""
    return []


@pytest.fixture
def http_client():
    """httpx.Client whose HEAD requests always succeed."""
    client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(200)))
    yield client
    client.close()


@pytest.fixture
def error_logger():
    return ErrorLogger(capacity=50)


@pytest.fixture
def make_pipeline(sleeps, http_client, error_logger):
    """
    Factory for a pipeline built from fakes.

    Usage:
        pipeline = make_pipeline(ScriptedModel(basic, enhanced))
    """

    def _make(model, store=None, client=None, seed=7):
        fallback = FallbackGenerator(random.Random(seed))
        uploader = UploadRetrier(
            store or FlakyStore(),
            error_logger=error_logger,
            sleep=sleeps.append,
            clock=lambda: 1700000000000,
        )
        return PhotoAnalysisPipeline(
            uploader=uploader,
            analyst=ColorAnalystAgent(model, fallback),
            stylist=PaletteStylistAgent(model, fallback, error_logger),
            fallback=fallback,
            http_client=client or http_client,
            error_logger=error_logger,
            tracker=PerformanceTracker(error_logger),
        )

    return _make
