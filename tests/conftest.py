import json
from pathlib import Path
from typing import Any

import pytest

from src.rules.loader import load_rules
from src.rules.models import Rules

PROJECT_ROOT = Path(__file__).parent.parent
FIXTURES_DIR = Path(__file__).parent / "fixtures"


def load_fixture(name: str) -> dict[str, Any]:
    """Load a function fixture: {"name", "input", "output"}."""
    with open(FIXTURES_DIR / name) as f:
        result: dict[str, Any] = json.load(f)
        return result


@pytest.fixture
def rules_path() -> Path:
    """Path to the project's real rules.yaml."""
    return PROJECT_ROOT / "rules.yaml"


@pytest.fixture
def rules(rules_path: Path) -> Rules:
    return load_rules(rules_path)


@pytest.fixture
def referral_payload() -> dict[str, Any]:
    """Function input for a validated referee above the minimum order."""
    return load_fixture("referral-valid.json")["input"]


@pytest.fixture
def store_credit_payload() -> dict[str, Any]:
    """Function input for a logged-in customer holding store credit."""
    return load_fixture("store-credit-partial.json")["input"]
