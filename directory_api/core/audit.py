"""Signed audit trail of directory events."""

from __future__ import annotations
import datetime
import hashlib
import hmac
import json
import logging
import threading
from pathlib import Path
from typing import Any

from .events import DirectoryEvent

logger = logging.getLogger(__name__)

AUDIT_LOG_FILENAME = "directory-events.jsonl"


def _sign_event(event: dict[str, Any], signing_key: bytes) -> str:
    """Generate HMAC-SHA256 signature for audit event."""
    if not signing_key:
        return ""
    # Canonical JSON representation for signing
    canonical = json.dumps(event, sort_keys=True, separators=(",", ":"))
    return hmac.new(signing_key, canonical.encode("utf-8"), hashlib.sha256).hexdigest()


def _describe_failure(failure: BaseException | None) -> dict[str, str] | None:
    if failure is None:
        return None
    return {"type": type(failure).__name__, "message": str(failure)}


class AuditListener:
    """Appends every directory event to a JSONL file with an HMAC signature.

    Write failures are not caught: like any listener failure they abort the
    operation being reported.

    Args:
        log_file: JSONL file to append to; its directory is created if needed
        signing_key: HMAC key. If empty, events are written unsigned.
    """

    def __init__(self, log_file: Path, signing_key: str = ""):
        self.log_file = Path(log_file)
        self.signing_key = signing_key.strip().encode("utf-8")
        self._lock = threading.Lock()

    def _ensure_audit_dir(self) -> None:
        """Create audit directory with restricted permissions."""
        audit_dir = self.log_file.parent
        audit_dir.mkdir(parents=True, exist_ok=True)
        audit_dir.chmod(0o700)

    def handle_event(self, event: DirectoryEvent) -> None:
        record = {
            "timestamp": datetime.datetime.now(datetime.timezone.utc).isoformat(),
            "directory_type": event.directory_type.value,
            "operation": event.operation.value,
            "identifier": event.identifier,
            "username": event.authenticated_user.identifier,
            "authentication_provider": event.authentication_provider.identifier,
            "success": event.succeeded,
            "failure": _describe_failure(event.failure),
        }

        signature = _sign_event(record, self.signing_key)
        if signature:
            record["signature"] = signature

        line = json.dumps(record, ensure_ascii=False) + "\n"

        # Request threads share one listener
        with self._lock:
            self._ensure_audit_dir()
            # Append to JSONL file (one JSON object per line)
            with self.log_file.open("a", encoding="utf-8") as f:
                f.write(line)
            self.log_file.chmod(0o600)


def verify_audit_log(log_file: Path, signing_key: str) -> tuple[int, int]:
    """Verify all signatures in the audit log.

    Returns:
        Tuple of (total_events, valid_signatures)
    """
    log_file = Path(log_file)
    if not log_file.exists():
        return 0, 0

    key = signing_key.strip().encode("utf-8")
    total = 0
    valid = 0

    with log_file.open("r", encoding="utf-8") as f:
        for line in f:
            if not line.strip():
                continue
            total += 1
            try:
                record = json.loads(line)
                stored_sig = record.pop("signature", "")
                if not stored_sig:
                    continue
                computed_sig = _sign_event(record, key)
                if computed_sig and hmac.compare_digest(stored_sig, computed_sig):
                    valid += 1
            except json.JSONDecodeError:
                logger.warning("Skipping malformed audit record in %s", log_file)
                continue

    return total, valid

