import os

# Bind to the port provided via the PORT environment variable, defaulting to
# 5000.
bind = f"0.0.0.0:{os.getenv('PORT', '5000')}"

# Each request does one short database round trip, so plain sync workers
# are enough.
worker_class = "sync"

# The default SimpleCache lives inside one process, so a second worker would
# keep serving a listing the first one already invalidated.  Raise
# WEB_CONCURRENCY only together with a shared CACHE_TYPE such as RedisCache.
workers = int(os.getenv("WEB_CONCURRENCY", "1"))
timeout = int(os.getenv("GUNICORN_TIMEOUT", "30"))

# Serve the app object created in run.py.
wsgi_app = "run:app"
