from __future__ import annotations

from pydantic import BaseModel, field_validator


class LaunchOptions(BaseModel):
    """Options the parent process passes on the command line."""

    model_config = {"frozen": True, "extra": "forbid"}

    parent_pid: int
    service_type: str
    debug: bool = False
    ipv6: bool = False

    @field_validator("service_type")
    @classmethod
    def _require_service(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("service type must not be blank")
        return value

    @property
    def tethered(self) -> bool:
        return self.parent_pid != 0
