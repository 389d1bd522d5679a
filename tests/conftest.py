from __future__ import annotations

import pytest

from autofill.config import EngineConfig


@pytest.fixture(scope="session")
def chromium():
    sync_api = pytest.importorskip("playwright.sync_api")
    try:
        pw = sync_api.sync_playwright().start()
    except Exception as e:
        pytest.skip(f"Playwright unavailable: {e}")
    try:
        browser = pw.chromium.launch(headless=True)
    except Exception as e:
        pw.stop()
        pytest.skip(f"Chromium unavailable: {e}")
    yield browser
    browser.close()
    pw.stop()


@pytest.fixture
def browser_page(chromium):
    context = chromium.new_context(viewport={"width": 1280, "height": 800})
    page = context.new_page()
    yield page
    context.close()


@pytest.fixture
def fast_config():
    return EngineConfig.no_delays(render_wait_attempts=1)
