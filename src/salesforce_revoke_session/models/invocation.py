from datetime import datetime, timezone
from typing import Any, Dict, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field


def utc_now_iso() -> str:
	"""ISO-8601 UTC timestamp with a trailing Z."""
	return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


# ---- Inputs ------------------------------------------------------------------

class InvocationParams(BaseModel):
	"""Job input parameters, supplied once per invocation."""
	model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)

	username: Optional[str] = None
	address: Optional[str] = None
	delay: Optional[Union[str, int, float]] = None  # enforced by the host framework, not here
	api_version: Optional[str] = Field(default=None, alias="apiVersion")


class ExecutionContext(BaseModel):
	"""Secrets and environment handed over by the host framework."""
	model_config = ConfigDict(extra="ignore", frozen=True)

	environment: Dict[str, str] = Field(default_factory=dict)
	secrets: Dict[str, str] = Field(default_factory=dict)

	@classmethod
	def from_raw(cls, context: Optional[Dict[str, Any]]) -> "ExecutionContext":
		context = context or {}
		return cls(
			environment=context.get("environment") or {},
			secrets=context.get("secrets") or {},
		)


# ---- Salesforce records ------------------------------------------------------

class SessionRecord(BaseModel):
	"""One row of the AuthSession query."""
	model_config = ConfigDict(extra="ignore")

	id: str = Field(alias="Id")
	users_id: Optional[str] = Field(default=None, alias="UsersId")


# ---- Outputs -----------------------------------------------------------------

class RevocationResult(BaseModel):
	status: Literal["success"] = "success"
	username: str
	userId: str
	sessionsRevoked: int = Field(ge=0)
	processed_at: str = Field(default_factory=utc_now_iso)
	address: Optional[str] = None


class HaltResult(BaseModel):
	status: Literal["halted"] = "halted"
	username: str = "unknown"
	reason: Optional[str] = None
	halted_at: str = Field(default_factory=utc_now_iso)


class RetryRequested(BaseModel):
	status: Literal["retry_requested"] = "retry_requested"


__all__ = [
	"utc_now_iso",
	"InvocationParams",
	"ExecutionContext",
	"SessionRecord",
	"RevocationResult",
	"HaltResult",
	"RetryRequested",
]
