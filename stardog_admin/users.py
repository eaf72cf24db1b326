from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple, TYPE_CHECKING

from .context import CallContext
from .response import DecodeInto, Response

if TYPE_CHECKING:
    from .client import Client


@dataclass
class UserList:
    users: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'UserList':
        if not isinstance(data, dict):
            raise TypeError(f"expected a JSON object, got {type(data).__name__}")
        users = data.get('users', [])
        if not isinstance(users, list):
            raise TypeError(f"'users' must be a list, got {type(users).__name__}")
        for u in users:
            if not isinstance(u, str):
                raise TypeError(f"user names must be strings, got {type(u).__name__}")
        return cls(users=list(users))


class UsersService:
    """User related endpoints of the Stardog admin API."""

    def __init__(self, client: 'Client'):
        self.client = client

    def list(self, ctx: CallContext) -> Tuple[UserList, Response]:
        req = self.client.new_request('GET', 'admin/users')
        target = DecodeInto(UserList.from_dict)
        resp = self.client.do(ctx, req, target)
        return target.value or UserList(), resp
