from .invocation import (
	ExecutionContext,
	HaltResult,
	InvocationParams,
	RetryRequested,
	RevocationResult,
	SessionRecord,
	utc_now_iso,
)

__all__ = [
	"ExecutionContext",
	"HaltResult",
	"InvocationParams",
	"RetryRequested",
	"RevocationResult",
	"SessionRecord",
	"utc_now_iso",
]
