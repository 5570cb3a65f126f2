from __future__ import annotations

import re
from typing import Optional

from filmcatalog.domain.errors import VersionInvalidError, VersionMissingError

# ETag style: the integer wrapped in double quotes, e.g. "3"
VERSION_TOKEN = re.compile(r'^"(\d+)"$')


def parse_version_token(token: Optional[str]) -> int:
    if token is None:
        raise VersionMissingError()
    m = VERSION_TOKEN.match(token)
    if m is None:
        raise VersionInvalidError(token)
    return int(m.group(1))


def to_version_token(version: int) -> str:
    return f'"{version}"'
