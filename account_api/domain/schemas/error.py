"""Wire shape for every error body the API emits."""

import time

from pydantic import BaseModel, Field


def _now_millis() -> int:
    return int(time.time() * 1000)


class ErrorResponse(BaseModel):
    """
    {code, message, timestamp}. timestamp is epoch milliseconds taken when the
    response is built, not when the failure was detected.
    """

    code: str
    message: str
    timestamp: int = Field(default_factory=_now_millis)

    @classmethod
    def now(cls, code: str, message: str) -> "ErrorResponse":
        return cls(code=code, message=message, timestamp=_now_millis())
