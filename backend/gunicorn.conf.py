"""Gunicorn settings for the auth service (``gunicorn -c gunicorn.conf.py``)."""

import os

wsgi_app = "authcore.wsgi:app"

# Bind & workers
bind = os.getenv("GUNICORN_BIND", "0.0.0.0:8000")
workers = int(os.getenv("GUNICORN_WORKERS", "2"))
threads = int(os.getenv("GUNICORN_THREADS", "4"))
timeout = 60
graceful_timeout = 30
keepalive = 5

# Logs to stdout/stderr; the app emits its own JSON records
accesslog = "-"
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()

# Trust proxy headers (TLS is terminated upstream)
forwarded_allow_ips = "*"
proxy_protocol = False
