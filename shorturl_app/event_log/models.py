"""
Data models for log events sent to the remote log collector.
"""

from typing import Dict, FrozenSet, Literal

from pydantic import BaseModel, Field, model_validator


Stack = Literal["backend", "frontend"]
Level = Literal["debug", "info", "warn", "error", "fatal"]

VALID_PACKAGES: Dict[str, FrozenSet[str]] = {
    "backend": frozenset({
        "cache", "controller", "cron job", "db", "domain",
        "handler", "repository", "route", "service",
    }),
    "frontend": frozenset({"api", "component", "hook", "page", "state", "style"}),
    "common": frozenset({"auth", "config", "middleware", "utils"}),
}


def allowed_packages(stack: str) -> FrozenSet[str]:
    """Packages a given stack may log under (its own + common)"""
    return VALID_PACKAGES.get(stack, frozenset()) | VALID_PACKAGES["common"]


def package_for(stack: str, preferred: str) -> str:
    """The preferred package if the stack allows it, else the common "utils" package"""
    if preferred in allowed_packages(stack):
        return preferred
    return "utils"


class LogRecord(BaseModel):
    """
    One structured log event.

    Serialized as {stack, level, package, message} - exactly the body
    the collector accepts.
    """

    stack: Stack = Field(..., description="Which side of the system emitted the event")
    level: Level = Field(..., description="Severity")
    package: str = Field(..., description="Emitting package, must be allowed for the stack")
    message: str = Field(..., description="Free-form message")

    @model_validator(mode="after")
    def check_package(self) -> "LogRecord":
        if self.package not in allowed_packages(self.stack):
            raise ValueError(
                f"package '{self.package}' is not allowed for stack '{self.stack}'"
            )
        return self

    model_config = {
        "json_schema_extra": {
            "example": {
                "stack": "backend",
                "level": "info",
                "package": "handler",
                "message": "Short URL created: abc123",
            }
        }
    }
