"""Automation identity: decides whether an actor is the bot."""

from typing import Callable, Iterable

# "Is this actor login the automation identity?"
ActorClassifier = Callable[[str | None], bool]


class BotIdentity:
    """Matches actor logins against one or more known automation accounts.

    GitHub logins are case-insensitive, so matching is too.
    """

    def __init__(self, logins: Iterable[str]) -> None:
        self._logins = frozenset(login.strip().lower() for login in logins if login and login.strip())
        if not self._logins:
            raise ValueError("At least one bot login is required")

    @classmethod
    def from_logins(cls, *logins: str) -> "BotIdentity":
        return cls(logins)

    @property
    def logins(self) -> frozenset[str]:
        return self._logins

    def __call__(self, login: str | None) -> bool:
        if not login:
            return False
        return login.strip().lower() in self._logins

    def __repr__(self) -> str:
        return f"BotIdentity({sorted(self._logins)!r})"
