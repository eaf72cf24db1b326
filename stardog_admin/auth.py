from __future__ import annotations
from dataclasses import dataclass, field

from requests.auth import HTTPBasicAuth


@dataclass(frozen=True)
class BasicAuth:
    """Username/password pair sent as HTTP basic authentication."""
    username: str
    password: str = field(repr=False)

    def apply(self, prepared) -> None:
        # sets a single Authorization header, replacing any existing one
        HTTPBasicAuth(self.username, self.password)(prepared)
