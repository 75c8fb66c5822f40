"""
Gunicorn configuration for the recruitment API.

Request handlers only wait on MongoDB, Brevo and Firebase, so a couple of
uvicorn workers per vCPU is plenty.
"""
import multiprocessing
import os

# Server socket
bind = os.getenv("GUNICORN_BIND", f"0.0.0.0:{os.getenv('PORT', '8000')}")
backlog = 2048

# Worker processes
workers = int(os.getenv("GUNICORN_WORKERS", min(multiprocessing.cpu_count() * 2, 4)))
worker_class = "uvicorn.workers.UvicornWorker"

# Worker lifecycle
max_requests = 1000
max_requests_jitter = 100

# Timeouts
# Must exceed EMAIL_TIMEOUT_SECONDS plus a database round trip
timeout = int(os.getenv("GUNICORN_TIMEOUT", 30))
keepalive = 5
graceful_timeout = 30

# Process naming
proc_name = "hrms_recruitment_api"

# Don't run as daemon (the container supervisor does this)
daemon = False

# Logging
accesslog = "-"  # Log to stdout
errorlog = "-"   # Log to stderr
loglevel = os.getenv("LOG_LEVEL", "info").lower()


def when_ready(server):
    """Called just after the server is started."""
    server.log.info("Recruitment API ready, spawning %s workers", workers)


def worker_abort(worker):
    """Called when a worker is aborted (usually a request exceeded `timeout`)."""
    worker.log.warning("Worker %s aborted", worker.pid)
