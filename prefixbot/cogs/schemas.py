"""Pydantic models that validate parsed command arguments."""

import re
from typing import Annotated, Literal

from pydantic import AfterValidator, BaseModel, Field, field_validator

SNOWFLAKE = re.compile(r"\d{17,20}")
HEX_COLOR = re.compile(r"#?([0-9a-fA-F]{6})")

MAX_TIMEOUT_SECONDS = 28 * 24 * 60 * 60
DEFAULT_TIMEOUT_SECONDS = 300
DEFAULT_REASON = "No reason provided"


def _snowflake(kind: str):
    def check(value: str) -> str:
        if not SNOWFLAKE.fullmatch(value):
            raise ValueError(f"must be a {kind} mention or ID")
        return value

    return check


UserId = Annotated[str, AfterValidator(_snowflake("user"))]
RoleId = Annotated[str, AfterValidator(_snowflake("role"))]
ChannelId = Annotated[str, AfterValidator(_snowflake("channel"))]


class MemberAction(BaseModel):
    user: UserId
    reason: str = DEFAULT_REASON


class TimeoutRequest(MemberAction):
    duration: int = DEFAULT_TIMEOUT_SECONDS

    @field_validator("duration")
    @classmethod
    def at_least_one_second(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Timeout must be at least 1 second")
        return v


class BulkDeleteRequest(BaseModel):
    count: int = Field(ge=1, le=100)


class PruneRequest(BaseModel):
    days: int = Field(default=7, ge=1, le=30)
    reason: str = "Inactive member cleanup"


class CreateRoleRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    color: int | None = None

    @field_validator("color", mode="before")
    @classmethod
    def parse_hex(cls, v: object) -> int | None:
        if v is None or isinstance(v, int):
            return v
        match = HEX_COLOR.fullmatch(str(v))
        if match is None:
            raise ValueError("must be a hex color like #99AAB5")
        return int(match.group(1), 16)


class RoleAssignment(BaseModel):
    user: UserId
    role: RoleId


class ChannelName(BaseModel):
    name: str = Field(min_length=1, max_length=100)


class ChannelTarget(BaseModel):
    channel: ChannelId


class MoversRequest(BaseModel):
    exchange: str = "binance"
    timeframe: Literal["1h", "4h", "24h", "7d"] = "24h"
    limit: int = Field(default=10, ge=1, le=25)


class SendRequest(BaseModel):
    channel: ChannelId
    content: str = Field(min_length=1, max_length=2000)
