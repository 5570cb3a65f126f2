import pytest

from filmcatalog.domain.errors import VersionInvalidError, VersionMissingError
from filmcatalog.domain.version import parse_version_token, to_version_token


def test_parse_quoted_integer():
    assert parse_version_token('"0"') == 0
    assert parse_version_token('"12"') == 12


def test_missing_token():
    with pytest.raises(VersionMissingError):
        parse_version_token(None)


@pytest.mark.parametrize("token", ["3", '"abc"', '"3', '""', '"-1"', '"1" '])
def test_malformed_token(token):
    with pytest.raises(VersionInvalidError):
        parse_version_token(token)


def test_to_version_token():
    assert to_version_token(7) == '"7"'
    assert parse_version_token(to_version_token(7)) == 7
