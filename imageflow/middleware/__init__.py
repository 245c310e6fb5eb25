# imageflow/middleware/__init__.py
from .request_logger import RequestLoggerMiddleware

__all__ = ["RequestLoggerMiddleware"]
