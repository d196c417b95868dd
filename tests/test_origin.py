import pytest

from safeshield.orchestration import parse_origin


@pytest.mark.parametrize(
    "origin,expected",
    [
        (None, None),
        ("https://app.example.org", "https://app.example.org"),
        ('{"url": "https://dapp.example", "name": "Dapp"}', "https://dapp.example"),
        ('{"url": ""}', None),
        ('{"name": "Dapp"}', None),
        ('{"url": 42}', None),
        ("[1, 2]", "[1, 2]"),
        ('"quoted"', '"quoted"'),
        ("{not json", "{not json"),
        ("", ""),
    ],
)
def test_parse_origin(origin, expected):
    assert parse_origin(origin) == expected
