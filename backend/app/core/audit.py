"""
Audit logging for security-critical operations.

Authentication events, workflow/stock/catalogue mutations and denied access
attempts are written as one JSON object per line to the "audit" logger so
they can be shipped separately from application logs.

Passwords and session tokens are never included.
"""
import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from app.schemas.auth import Identity

# Separate logger for audit events (can be shipped to centralized logging)
audit_logger = logging.getLogger("audit")


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


class AuditLog:
    """Central audit logging for security-critical events."""

    @staticmethod
    def log_authentication(
        action: str,  # "login", "logout", "register", "failed_login"
        username: str,
        role: str,
        ip_address: str,
        success: bool,
        reason: str = "",
    ):
        """
        Log authentication events.

        Usage:
            AuditLog.log_authentication("login", "p1", "pharmacy", "127.0.0.1", True)
            AuditLog.log_authentication("failed_login", "p1", "pharmacy", "127.0.0.1", False, reason="Bad password")
        """
        log_entry = {
            "timestamp": _timestamp(),
            "event_type": f"auth.{action}",
            "username": username,
            "role": role,
            "ip_address": ip_address,
            "success": success,
        }

        if reason and not success:
            log_entry["reason"] = reason

        if success:
            audit_logger.info(json.dumps(log_entry))
        else:
            audit_logger.warning(json.dumps(log_entry))

    @staticmethod
    def log_action(
        action: str,  # "create", "update", "delete", "accept", "deliver", "add", "remove"
        resource_type: str,  # "command", "stock", "medicine", "demand", "pharmacy", ...
        resource_id: int,
        identity: Identity,
        changes: Optional[Dict[str, Any]] = None,
    ):
        """
        Log a mutation: who (id + role), what (resource type and id), when, and what changed.

        Usage:
            AuditLog.log_action("accept", "command", 12, identity)
            AuditLog.log_action("remove", "stock", 4, identity, changes={"units": 5})
        """
        log_entry = {
            "timestamp": _timestamp(),
            "event_type": f"{resource_type}.{action}",
            "actor_id": identity.id,
            "actor_role": identity.role,
            "resource_id": resource_id,
        }

        if changes:
            log_entry["changes"] = changes

        audit_logger.info(json.dumps(log_entry, default=str))

    @staticmethod
    def log_access_denied(
        action: str,  # "read", "update", "delete", "accept", "deliver"
        resource_type: str,
        resource_id: Optional[int],
        identity: Optional[Identity],
        reason: str,
    ):
        """
        Log denied access attempts: wrong role, or touching another account's rows.
        """
        log_entry = {
            "timestamp": _timestamp(),
            "event_severity": "WARNING",
            "event_type": "access_denied",
            "action": action,
            "resource_type": resource_type,
            "resource_id": resource_id,
            "actor_id": identity.id if identity else None,
            "actor_role": identity.role if identity else None,
            "reason": reason,
        }

        audit_logger.warning(json.dumps(log_entry))

    @staticmethod
    def log_security_event(
        event_type: str,  # "sessions_swept", "sessions_revoked"
        details: Optional[Dict[str, Any]] = None,
    ):
        log_entry = {
            "timestamp": _timestamp(),
            "event_type": f"security.{event_type}",
        }

        if details:
            log_entry["details"] = details

        audit_logger.info(json.dumps(log_entry, default=str))
