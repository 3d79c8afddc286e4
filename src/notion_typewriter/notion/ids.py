# ABOUTME: Normalizes Notion page URLs and raw IDs into hyphenated UUIDs.
# ABOUTME: Returns None for malformed input instead of raising.

import re
import uuid
from urllib.parse import urlparse

_HEX_ID = re.compile(r"^[0-9a-fA-F]{32}$")


def parse_page_id(value: str | None) -> str | None:
    """Extract the page ID from a Notion URL or a bare 32-char hex ID.

    URLs may carry a slug before the ID, e.g.
    ``https://www.notion.so/Reporter-Dash-3049166fd9fd80d0b8ecc9b2f87705c1``.
    Bare IDs may already be hyphenated.

    Returns:
        The ID in 8-4-4-4-12 form, or None if no valid ID was found.
    """
    if not value or not isinstance(value, str):
        return None

    raw = value.strip()
    if raw.startswith(("http://", "https://")):
        segments = [s for s in urlparse(raw).path.split("/") if s]
        last_segment = segments[-1] if segments else ""
        candidate = last_segment[-32:]
    else:
        candidate = raw.replace("-", "")

    if not _HEX_ID.match(candidate):
        return None

    return str(uuid.UUID(hex=candidate))
