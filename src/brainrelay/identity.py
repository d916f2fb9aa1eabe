"""User identity resolution for incoming requests.

There is no authentication layer; every request is attributed to a user id by
a resolver. The default resolver returns one configured id. Swap it on the
application state to attribute requests differently.
"""

from typing import Protocol

from fastapi import Request


class UserResolver(Protocol):
    """Anything that can map a request to a user id."""

    def resolve(self, request: Request) -> str:
        ...


class StaticUserResolver:
    """Attributes every request to the same user."""

    def __init__(self, user_id: str) -> None:
        self.user_id = user_id

    def resolve(self, request: Request) -> str:
        return self.user_id
