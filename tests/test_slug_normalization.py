import pytest

from urltabs.tabs.slug import sanitize_title


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Shoes!!", "shoes"),
        ("General", "general"),
        ("Big  Sale -- Now", "big-sale-now"),
        ("  --Trim me--  ", "trim-me"),
        ("Café Crème", "cafe-creme"),
        ("caf%C3%A9", "cafe"),
        ("<b>Bold</b> tab", "bold-tab"),
        ("snake_case", "snake-case"),
        ("", ""),
        (None, ""),
    ],
)
def test_sanitize_title(raw, expected):
    assert sanitize_title(raw) == expected


@pytest.mark.parametrize("raw", ["Shoes!!", "Café Crème", "a--b", "-x-", "Ünïcødé 2024", "%20"])
def test_sanitize_title_is_idempotent(raw):
    once = sanitize_title(raw)
    assert sanitize_title(once) == once
