"""Domain events for the account lifecycle. Each handler writes one audit log line."""

import logging
from dataclasses import dataclass
from typing import ClassVar

from account_api.domain.models.user import User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UserRegistered:
    user: User

    kind: ClassVar[str] = "user.registered"

    async def handle(self) -> None:
        logger.info(
            "user_registered",
            extra={
                "user_id": str(self.user.id),
                "nickname": self.user.nickname,
                "email": self.user.email,
            },
        )


@dataclass(frozen=True)
class UserLoggedIn:
    user: User

    kind: ClassVar[str] = "user.logged_in"

    async def handle(self) -> None:
        logger.info(
            "user_logged_in",
            extra={"user_id": str(self.user.id), "nickname": self.user.nickname},
        )
