# gunicorn.conf.py
import os

# Application
wsgi_app = "stackit.wsgi:application"

# Worker configuration
workers = int(os.getenv("GUNICORN_WORKERS", 2))
worker_class = "sync"
# Enhancement calls block a worker for up to GEMINI_TIMEOUT_MS per call
timeout = int(os.getenv("GUNICORN_TIMEOUT", 60))
keepalive = 2
max_requests = 1000
max_requests_jitter = 50

# Logging
accesslog = "-"
errorlog = "-"
loglevel = os.getenv("GUNICORN_LOG_LEVEL", "info")

# Process naming
proc_name = "stackit"

# Bind address
bind = os.getenv("GUNICORN_BIND", "0.0.0.0:8000")

# Behind a TLS-terminating proxy
forwarded_allow_ips = os.getenv("FORWARDED_ALLOW_IPS", "*")
