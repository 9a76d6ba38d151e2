import os

# Application
wsgi_app = "clicker_server:create_app()"

# Bind & workers (requests are synchronous; scale with processes and threads)
bind = os.getenv("GUNICORN_BIND", "0.0.0.0:8000")
workers = int(os.getenv("GUNICORN_WORKERS", "2"))
threads = int(os.getenv("GUNICORN_THREADS", "4"))
timeout = 60
graceful_timeout = 30
keepalive = 5

# Logs to stdout/stderr; the app itself emits JSON lines
accesslog = "-"
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()

# ProxyFix in the app handles X-Forwarded-*
forwarded_allow_ips = "*"
proxy_protocol = False
