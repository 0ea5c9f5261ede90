"""
FastAPI Routes.

수신 API (POST /push-photo, POST /push-text)
"""

from . import push

__all__ = ["push"]
