import logging
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from campusvault.core.database import SessionLocal
from campusvault.core.config import settings
from campusvault.crud.user import purge_expired_sessions
from campusvault.utils.backup import create_backup, prune_backups

logger = logging.getLogger(__name__)

scheduler = AsyncIOScheduler()


def run_backup():
    """
    Scheduled task: full backup, then prune old backups.
    Plain function so the scheduler runs it in its thread pool.
    """
    logger.info("Starting scheduled task: backup")
    db = SessionLocal()
    try:
        name = create_backup(db, settings.UPLOAD_DIR, settings.BACKUP_DIR)
        removed = prune_backups(settings.BACKUP_DIR, settings.BACKUP_KEEP)
        logger.info(f"Scheduled backup {name} done, pruned {len(removed)} old backup(s)")
    except Exception as e:
        logger.error(f"Scheduled backup failed: {e}", exc_info=True)
    finally:
        db.close()


def run_session_cleanup():
    """Scheduled task: drop expired login sessions"""
    db = SessionLocal()
    try:
        purged = purge_expired_sessions(db)
        if purged:
            logger.info(f"Purged {purged} expired sessions")
    except Exception as e:
        logger.error(f"Session cleanup failed: {e}", exc_info=True)
        db.rollback()
    finally:
        db.close()


def start_scheduler():
    """Start the scheduler"""
    if scheduler.running:
        return

    scheduler.add_job(
        run_session_cleanup,
        trigger=IntervalTrigger(hours=1),
        id="session_cleanup_job",
        replace_existing=True,
        name="Purge Expired Sessions"
    )

    if settings.BACKUP_SCHEDULE_ENABLED:
        scheduler.add_job(
            run_backup,
            trigger=IntervalTrigger(hours=settings.BACKUP_INTERVAL_HOURS),
            id="backup_job",
            replace_existing=True,
            name="Backup Database And Uploads"
        )
        logger.info(f"Added backup_job with interval {settings.BACKUP_INTERVAL_HOURS} hours")

    scheduler.start()
    logger.info("Scheduler started")


def stop_scheduler():
    """Shut the scheduler down"""
    if scheduler.running:
        scheduler.shutdown()
        logger.info("Scheduler shutdown")
