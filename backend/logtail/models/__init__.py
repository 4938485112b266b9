"""
SQLAlchemy models
"""
from logtail.core.database import Base
from logtail.models.sys_log import SysLog  # noqa: F401
