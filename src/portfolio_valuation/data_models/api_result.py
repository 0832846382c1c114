"""Typed outcome of an API call.

Every API client method returns either `Ok` with the parsed payload or
`Err` describing why no payload is available. Callers branch on the type
(or the `kind` tag) instead of probing optional fields.
"""
from __future__ import annotations

from typing import Any, Dict, Generic, Literal, Optional, TypeVar, Union
from pydantic import BaseModel, Field

T = TypeVar("T")


class Ok(BaseModel, Generic[T]):
    kind: Literal["ok"] = "ok"
    value: T

    @property
    def ok(self) -> bool:
        return True


class Err(BaseModel):
    kind: Literal["err"] = "err"
    message: str
    # None when the request never produced an HTTP response
    status_code: Optional[int] = None
    details: Dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return False


ApiResult = Union[Ok[T], Err]
