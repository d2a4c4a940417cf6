from __future__ import annotations

import os

chdir = "avatar_app"
wsgi_app = "config.wsgi:application"
bind = os.environ.get("GUNICORN_BIND", "0.0.0.0:8000")
workers = int(os.environ.get("GUNICORN_WORKERS", "2"))

accesslog = "-"
errorlog = "-"
capture_output = True
loglevel = os.environ.get("LOG_LEVEL", "info").lower()
forwarded_allow_ips = "*"
access_log_format = '%({x-forwarded-for}i)s %(t)s "%(r)s" %(s)s %(b)s %(L)ss'

logconfig_dict = {
    "version": 1,
    "disable_existing_loggers": False,
    "filters": {
        # Health checks hit /healthz and /readyz every few seconds.
        "health_endpoint": {
            "()": "config.logging_filters.HealthEndpointFilter",
        },
    },
    "formatters": {
        "access": {"format": "%(message)s"},
        "error": {
            "format": "[{asctime}] {levelname} {name}: {message}",
            "style": "{",
        },
    },
    "handlers": {
        "access": {"class": "logging.StreamHandler", "formatter": "access"},
        "error": {"class": "logging.StreamHandler", "formatter": "error"},
    },
    "loggers": {
        "gunicorn.error": {"handlers": ["error"], "level": "INFO", "propagate": False},
        "gunicorn.access": {
            "handlers": ["access"],
            "level": "INFO",
            "filters": ["health_endpoint"],
            "propagate": False,
        },
    },
}
