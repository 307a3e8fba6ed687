"""
utils/scheduler.py
---------------------------------
Timer -> job plumbing for periodic maintenance.

A ``Job`` knows its name, its trigger and what to run; the
``AttendanceScheduler`` owns one APScheduler ``BackgroundScheduler``
and runs registered jobs inside the Flask app context.
"""

import logging
from zoneinfo import ZoneInfo

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from utils.mark_attendance import reset_attendance

logger = logging.getLogger(__name__)


class Job:
    name = None

    def trigger(self, timezone):
        raise NotImplementedError

    def run(self):
        raise NotImplementedError


class DailyResetJob(Job):
    """Deletes every attendance record not dated today."""

    name = "daily-attendance-reset"

    def __init__(self, cron="0 0 * * *"):
        self.cron = cron

    def trigger(self, timezone):
        return CronTrigger.from_crontab(self.cron, timezone=timezone)

    def run(self):
        return reset_attendance()


class AttendanceScheduler:
    def __init__(self, app=None):
        self.app = None
        self._scheduler = None
        self.jobs = []
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        self.app = app
        self._scheduler = BackgroundScheduler(
            timezone=ZoneInfo(app.config["TIMEZONE"]),
            job_defaults={
                "coalesce": True,
                "misfire_grace_time": 3600,
            },
        )

    @property
    def running(self):
        return self._scheduler is not None and self._scheduler.running

    def add_job(self, job):
        self.jobs.append(job)
        self._scheduler.add_job(
            self.run_job,
            trigger=job.trigger(self._scheduler.timezone),
            args=[job],
            id=job.name,
            name=job.name,
            replace_existing=True,
        )
        logger.info("Scheduled job '%s'", job.name)

    def run_job(self, job):
        with self.app.app_context():
            try:
                return job.run()
            except Exception:
                logger.exception("Scheduled job '%s' failed", job.name)
                raise

    def start(self):
        if not self.running:
            self._scheduler.start()
            logger.info("Scheduler started with %d job(s)", len(self.jobs))

    def shutdown(self, wait=False):
        if self.running:
            self._scheduler.shutdown(wait=wait)
            logger.info("Scheduler stopped")

