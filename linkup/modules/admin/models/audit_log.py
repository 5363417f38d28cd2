from datetime import datetime

from sqlalchemy import Column, String, DateTime, ForeignKey, Text

from linkup.db.session import Base

DELETE_POST = "DELETE_POST"
WARN_USER = "WARN_USER"
BAN_USER = "BAN_USER"
UNBAN_USER = "UNBAN_USER"
DISMISS_REPORT = "DISMISS_REPORT"

ADMIN_ACTIONS = (DELETE_POST, WARN_USER, BAN_USER, UNBAN_USER, DISMISS_REPORT)


class AuditLog(Base):
    __tablename__ = "audit_logs"

    id = Column(String, primary_key=True, index=True)
    admin_id = Column(String, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    action = Column(String, nullable=False)
    target_id = Column(String, nullable=True)
    details = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
