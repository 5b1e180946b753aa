# certregistry/tasks.py
import logging
from apscheduler.schedulers.background import BackgroundScheduler
from certregistry.uploads import sweep_stale_uploads
from certregistry.settings import settings

log = logging.getLogger("tasks")

def sweep_uploads():
    log.debug("Running upload sweep...")
    sweep_stale_uploads(settings.UPLOAD_MAX_AGE_MINUTES)

scheduler = BackgroundScheduler()
scheduler.add_job(sweep_uploads, "interval", minutes=settings.UPLOAD_SWEEP_MINUTES)
