"""
SQLAlchemy model for the system log table
"""
from logtail.core.database import Base
from sqlalchemy import Column, Index, Integer, SmallInteger, String, Text


class SysLog(Base):
    """
    One row of the ``sys_log`` table written by the CMS backend.

    ``details`` holds an sprintf template and ``log_data`` the PHP-serialized
    array of its arguments.
    """
    __tablename__ = "sys_log"

    uid = Column(Integer, primary_key=True, autoincrement=True)
    userid = Column(Integer, default=0, nullable=False)
    action = Column(SmallInteger, default=0, nullable=False)
    recuid = Column(Integer, default=0, nullable=False)
    tablename = Column(String(255), default="", nullable=False)
    recpid = Column(Integer, default=0, nullable=False)
    error = Column(SmallInteger, default=0, nullable=False)
    details = Column(Text, nullable=True)
    tstamp = Column(Integer, default=0, nullable=False, index=True)
    type = Column(SmallInteger, default=0, nullable=False)
    details_nr = Column(SmallInteger, default=0, nullable=False)
    IP = Column(String(39), default="", nullable=False)
    log_data = Column(Text, nullable=True)
    event_pid = Column(Integer, default=-1, nullable=False)
    workspace = Column(Integer, default=0, nullable=False)
    NEWid = Column(String(30), default="", nullable=False)

    __table_args__ = (
        Index("idx_sys_log_event", "userid", "event_pid"),
        Index("idx_sys_log_recuid", "recuid", "uid"),
    )

    def __repr__(self):
        return f"<SysLog(uid={self.uid}, tstamp={self.tstamp}, details={self.details!r})>"
