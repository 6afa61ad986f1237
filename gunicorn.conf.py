"""Gunicorn production configuration for the dashboard API."""
import multiprocessing
import os

bind = os.environ.get("BIND", "0.0.0.0:8000")
wsgi_app = "freightdesk.main:app"
chdir = "backend"

# The in-memory store and the status badge debounce state live in-process,
# so only the SQL backend can be spread over several workers.
if os.environ.get("STORE_BACKEND", "memory") == "sql":
    workers = multiprocessing.cpu_count() * 2 + 1
else:
    workers = 1
worker_class = "uvicorn.workers.UvicornWorker"
timeout = 60
graceful_timeout = 30
keepalive = 5
max_requests = 1000
max_requests_jitter = 100
accesslog = "-"
errorlog = "-"
loglevel = "info"
