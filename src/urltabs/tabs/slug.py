from __future__ import annotations

import re
import unicodedata
from typing import Any
from urllib.parse import unquote

_TAGS = re.compile(r"<[^>]*>")
_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def sanitize_title(value: Any) -> str:
    """
    Turn free text (or a URL segment) into a tab slug.

    "Shoes!!" -> "shoes", "Big  Sale" -> "big-sale", "Café" -> "cafe".
    Output only ever contains [a-z0-9-], so applying it twice is a no-op.
    """
    if value is None:
        return ""

    text = unquote(str(value))
    text = _TAGS.sub("", text)

    # drop accents: NFKD splits "é" into "e" + combining mark
    text = unicodedata.normalize("NFKD", text)
    text = "".join(ch for ch in text if not unicodedata.combining(ch))

    text = _NON_ALNUM.sub("-", text.lower())
    return text.strip("-")
