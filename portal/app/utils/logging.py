"""Structured logging for the portal API"""

import logging
import json
from datetime import datetime, timezone
from typing import Dict, Any, Optional
from pathlib import Path

AGENT_NAME = "scout_portal"


class StructuredLogger:
    """JSON event logger shared by routes, workflows and scripts"""

    def __init__(self, name: str = AGENT_NAME, log_dir: Optional[Path] = None):
        self.name = name
        self.logger = logging.getLogger(name)
        self.logger.setLevel(logging.INFO)

        if not self.logger.handlers:
            self._configure_handlers(log_dir or Path(__file__).resolve().parents[2] / "logs")

    def _configure_handlers(self, log_dir: Path) -> None:
        """Console output plus an all-events file and an errors-only file."""
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )
        log_dir.mkdir(parents=True, exist_ok=True)

        handlers = [
            (logging.StreamHandler(), logging.INFO),
            (logging.FileHandler(log_dir / "portal_service.log", encoding="utf-8"), logging.INFO),
            (logging.FileHandler(log_dir / "portal_service_error.log", encoding="utf-8"), logging.ERROR),
        ]
        for handler, level in handlers:
            handler.setLevel(level)
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)
        self.logger.propagate = False

    def _emit(self, level: int, kind: str, event: str, data: Optional[Dict[str, Any]]) -> None:
        payload = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            kind: event,
            "agent": self.name,
        }
        if data:
            payload.update(data)

        # bson ObjectIds, datetimes and paths end up in the payloads
        self.logger.log(level, f"{kind.upper()}: {json.dumps(payload, default=str)}")

    def log_step(self, step: str, data: Optional[Dict[str, Any]] = None):
        """Log a processing step"""
        self._emit(logging.INFO, "step", step, data)

    def log_warning(self, warning_type: str, data: Optional[Dict[str, Any]] = None):
        """Log a recoverable anomaly, e.g. a blob that was already gone"""
        self._emit(logging.WARNING, "warning", warning_type, data)

    def log_error(self, error_type: str, data: Optional[Dict[str, Any]] = None):
        self._emit(logging.ERROR, "error", error_type, data)

    def log_blob_cleanup(self, stored_name: str, reason: str):
        """Record a compensating blob delete after a failed upload"""
        self.log_step("blob_cleanup_completed", {
            "stored_name": stored_name,
            "reason": reason,
        })


# Global logger instance
logger = StructuredLogger()
