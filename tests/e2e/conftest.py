# tests/e2e/conftest.py
"""
Fixtures for end-to-end tests: a real Chromium page serving a small site
from in-memory routes, so no network access is needed.
"""

from contextlib import AsyncExitStack
from typing import Dict, Tuple

import pytest
import pytest_asyncio

from sanity_checks.core.browser_manager import get_browser_manager
from sanity_checks.core.exceptions import BrowserLaunchException

BASE_URL = "http://sanity.test"

HOME_PAGE = """<!DOCTYPE html>
<html>
<head>
  <link rel="stylesheet" href="/site.css">
  <script src="/app.js"></script>
</head>
<body>
  <div class="spinner">Loading...</div>
  <main><h1>Catalogue</h1><p>Welcome.</p></main>
</body>
</html>"""

APP_JS = """
window.addEventListener("load", () => {
  setTimeout(() => { document.querySelector(".spinner").style.display = "none"; }, 100);
});
"""

STUCK_PAGE = """<!DOCTYPE html>
<html><body><div class="loading-indicator">Loading...</div><p>content</p></body></html>"""

BLANK_PAGE = "<!DOCTYPE html><html><head></head><body>   </body></html>"

LAZY_BROKEN_SCRIPT_PAGE = """<!DOCTYPE html>
<html>
<body>
  <p>Lazy bundle</p>
  <script>
    setTimeout(() => {
      const script = document.createElement("script");
      script.src = "/broken.js";
      document.head.appendChild(script);
    }, 200);
  </script>
</body>
</html>"""

BROKEN_STYLESHEET_PAGE = """<!DOCTYPE html>
<html><head><link rel="stylesheet" href="/broken.css"></head><body><p>Unstyled</p></body></html>"""

BROKEN_IMAGE_PAGE = """<!DOCTYPE html>
<html><body><p>Gallery</p><img src="/broken.png"></body></html>"""

# path -> (status, content type, body); None means the request is aborted
SITE: Dict[str, Tuple[int, str, str]] = {
    "/": (200, "text/html", HOME_PAGE),
    "/site.css": (200, "text/css", "body { font-family: sans-serif; }"),
    "/app.js": (200, "application/javascript", APP_JS),
    "/stuck": (200, "text/html", STUCK_PAGE),
    "/blank": (200, "text/html", BLANK_PAGE),
    "/lazy-broken-script": (200, "text/html", LAZY_BROKEN_SCRIPT_PAGE),
    "/broken-stylesheet": (200, "text/html", BROKEN_STYLESHEET_PAGE),
    "/broken-image": (200, "text/html", BROKEN_IMAGE_PAGE),
}

ABORTED = {"/broken.js", "/broken.css", "/broken.png"}


async def serve_site(route):
    path = route.request.url[len(BASE_URL):] or "/"
    if path in ABORTED:
        await route.abort("failed")
        return
    if path not in SITE:
        await route.fulfill(status=404, content_type="text/html", body="<h1>Not Found</h1>")
        return

    status, content_type, body = SITE[path]
    await route.fulfill(status=status, content_type=content_type, body=body)


@pytest_asyncio.fixture
async def browser_session():
    async with AsyncExitStack() as stack:
        try:
            session = await stack.enter_async_context(
                get_browser_manager().async_browser_session("chromium")
            )
        except BrowserLaunchException as e:
            pytest.skip(f"Chromium is not available: {e}")
        yield session


@pytest_asyncio.fixture
async def site_page(browser_session):
    page = await browser_session.new_page()
    await page.route(f"{BASE_URL}/**", serve_site)
    return page


@pytest.fixture
def base_url() -> str:
    return BASE_URL
