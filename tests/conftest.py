"""
Shared fixtures for KBRT tests.
"""

import pytest

from kbrt.core.engine import Engine, setup_default_pipeline


@pytest.fixture(autouse=True)
def _no_theme_override(monkeypatch):
    """Keep a KBRT_THEME from the environment out of the tests."""
    monkeypatch.delenv("KBRT_THEME", raising=False)


@pytest.fixture
def engine() -> Engine:
    """A fresh engine with the default pipeline registered."""
    eng = Engine()
    setup_default_pipeline(eng)
    return eng


@pytest.fixture
def sample_article() -> str:
    return (
        "# Fire TV Stick Not Responding\n"
        "\n"
        "If your remote stops working, try these steps.\n"
        "\n"
        "## Quick Checks\n"
        "- Replace the **batteries**\n"
        "- Move closer to the device\n"
        "\n"
        "1. Unplug the stick\n"
        "wait 30 seconds\n"
        "2. Plug it back in\n"
    )


@pytest.fixture
def sample_report() -> str:
    return (
        "## Validation Report\n"
        "\n"
        "POTENTIAL HALLUCINATIONS:\n"
        "- Claims the remote has a 2-year battery life\n"
        "- Mentions a reset button that does not exist\n"
        "\n"
        "KEY IMPROVEMENTS:\n"
        "- Shorter steps\n"
        "\n"
        "Amazon Q scores (1-10):\n"
        "* Semantic Search Score: 8/10\n"
        "* Content Clarity Score: 9/10\n"
        "\n"
        "Score: 6/10\n"
        "RECOMMENDATION: REVIEW NEEDED - verify battery claims\n"
    )
