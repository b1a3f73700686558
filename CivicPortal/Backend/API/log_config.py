import logging
import os
from concurrent_log_handler import ConcurrentRotatingFileHandler

# 🔹 log folder
LOG_DIR = os.getenv("LOG_DIR", "logs")
if not os.path.exists(LOG_DIR):
    os.makedirs(LOG_DIR)

# 🔹 shared formatter
log_formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")


def _rotating_handler(filename):
    handler = ConcurrentRotatingFileHandler(
        filename=os.path.join(LOG_DIR, filename),
        maxBytes=300*1024*1024, # 300MB
        backupCount=10,         # keep at most 10 files
        encoding="utf-8",
    )
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(log_formatter)
    return handler


# 🔹 app log handler (app.log)
app_log_handler = _rotating_handler("app.log")

# 🔹 moderation log handler (moderation.log) - staging, approvals, role gate
moderation_log_handler = _rotating_handler("moderation.log")

# 🔹 civic log handler (civic.log) - civic org sessions and self-service content
civic_log_handler = _rotating_handler("civic.log")

# 🔹 root logger
root_logger = logging.getLogger()
root_logger.setLevel(logging.DEBUG)

# only add handlers once (gunicorn workers re-import this module)
if not any(isinstance(h, logging.FileHandler) for h in root_logger.handlers):
    root_logger.addHandler(app_log_handler)
if not any(isinstance(h, logging.StreamHandler) for h in root_logger.handlers):
    root_logger.addHandler(logging.StreamHandler())

# 🔹 moderation logger
moderation_logger = logging.getLogger('moderation')
moderation_logger.setLevel(logging.DEBUG)
moderation_logger.propagate = False  # do not duplicate into app.log
if not moderation_logger.handlers:
    moderation_logger.addHandler(moderation_log_handler)
    moderation_logger.addHandler(logging.StreamHandler())

# 🔹 civic logger
civic_logger = logging.getLogger('civic')
civic_logger.setLevel(logging.DEBUG)
civic_logger.propagate = False
if not civic_logger.handlers:
    civic_logger.addHandler(civic_log_handler)
    civic_logger.addHandler(logging.StreamHandler())

# quiet third-party loggers
logging.getLogger("urllib3").setLevel(logging.WARNING)
logging.getLogger("botocore").setLevel(logging.WARNING)


def get_moderation_logger():
    """Logger for submissions, approvals and the role gate"""
    return moderation_logger

def get_civic_logger():
    """Logger for civic organization sessions and content"""
    return civic_logger

def get_app_logger():
    """Default application logger"""
    return root_logger
