"""Shared constants and helpers for feature fixture files."""

from pathlib import Path

DATA_DIR = Path(__file__).parent / "data"

SHOPPING_URI = "file:features/shopping.feature"
PLAIN_URI = "file:features/plain.feature"
INVALID_URI = "file:features/invalid.feature"


def read_feature(name: str) -> str:
    """Return the text of a feature file under tests/data."""
    return (DATA_DIR / name).read_text(encoding="utf-8")
