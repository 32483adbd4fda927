"""
Background session sweeper.

Deletes expired session rows on a fixed interval. Runs as an asyncio task
alongside FastAPI; the blocking database work happens in the default
executor so request handling is never held up.
"""
import asyncio
import logging
from typing import Optional

from app.core.audit import AuditLog
from app.core.config import settings
from app.db.session import SessionLocal
from app.services.session_store import SessionStore

logger = logging.getLogger(__name__)

_sweeper_running = False
_sweeper_task: Optional[asyncio.Task] = None


def sweep_expired_sessions() -> int:
    """Open a session, sweep, close. Errors are logged, never raised to the loop."""
    db = SessionLocal()
    try:
        removed = SessionStore(db).sweep()
        if removed:
            logger.info(f"[SessionSweeper] Removed {removed} expired sessions")
            AuditLog.log_security_event("sessions_swept", {"removed": removed})
        else:
            logger.debug("[SessionSweeper] No expired sessions")
        return removed
    except Exception as e:
        db.rollback()
        logger.error(f"[SessionSweeper] Sweep failed: {e}", exc_info=True)
        return 0
    finally:
        db.close()


async def _sweeper_loop(interval: float):
    global _sweeper_running
    _sweeper_running = True

    logger.info(f"[SessionSweeper] Started. Interval: {interval}s")

    while _sweeper_running:
        await asyncio.sleep(interval)
        if not _sweeper_running:
            break
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, sweep_expired_sessions)


def start_session_sweeper(interval: Optional[float] = None):
    """Start the background sweeper. Called from the FastAPI lifespan."""
    global _sweeper_task
    interval = interval or settings.SESSION_SWEEP_INTERVAL_SECONDS
    _sweeper_task = asyncio.create_task(_sweeper_loop(interval))
    return _sweeper_task


async def stop_session_sweeper():
    """Stop the sweeper and wait for the task to finish."""
    global _sweeper_running, _sweeper_task
    _sweeper_running = False
    if _sweeper_task is not None:
        _sweeper_task.cancel()
        try:
            await _sweeper_task
        except asyncio.CancelledError:
            pass
        _sweeper_task = None
    logger.info("[SessionSweeper] Stopped")
