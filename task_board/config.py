"""API base URL resolution and page injection."""

import json
import os
import re
from pathlib import Path
from typing import Optional

from bs4 import BeautifulSoup

DEFAULT_API_BASE = "http://localhost:8080/api"
PAGE_TEMPLATE = Path(__file__).parent / "static" / "index.html"

_API_BASE_PATTERN = re.compile(r"window\.API_BASE\s*=\s*(\"(?:[^\"\\]|\\.)*\")")


def _json_dumps_html_safe(value: str) -> str:
    """Serialize value to JSON, escaping characters unsafe inside <script> tags."""
    return json.dumps(value).replace("<", "\\u003c").replace(">", "\\u003e")


def load_page_template() -> str:
    return PAGE_TEMPLATE.read_text(encoding="utf-8")


def inject_api_base(html: str, api_base: str) -> str:
    """Inject ``window.API_BASE`` before </head> (or </body>, or the end)."""
    injection = f"<script>window.API_BASE = {_json_dumps_html_safe(api_base)};</script>"

    for closing in ("</head>", "</body>"):
        if closing in html.lower():
            pattern = re.compile(re.escape(closing), re.IGNORECASE)
            return pattern.sub(f"{injection}{closing}", html, count=1)

    return html + injection


def read_api_base(html: str) -> Optional[str]:
    """Return the ``window.API_BASE`` value injected into the page, if any."""
    soup = BeautifulSoup(html, "lxml")
    for script in soup.find_all("script"):
        match = _API_BASE_PATTERN.search(script.get_text())
        if match:
            return json.loads(match.group(1))
    return None


def resolve_api_base(html: Optional[str] = None) -> str:
    """Page value first, then the ``API_BASE`` environment variable, then the default."""
    if html:
        from_page = read_api_base(html)
        if from_page:
            return from_page
    return os.getenv("API_BASE") or DEFAULT_API_BASE
