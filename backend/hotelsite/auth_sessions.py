from __future__ import annotations

import secrets
import time

from sqlalchemy import BigInteger, Column, ForeignKey, Integer, String

from .models import Base


class SessionRow(Base):
    __tablename__ = "admin_sessions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    admin_id = Column(Integer, ForeignKey("admins.id", ondelete="CASCADE"), nullable=False, index=True)
    token_id = Column(String(96), nullable=False, unique=True)
    expires_at = Column(BigInteger, nullable=False, index=True)  # unix seconds
    created_at = Column(BigInteger, nullable=False)

    def is_live(self, now: int) -> bool:
        return now < int(self.expires_at)


def new_session_id(admin_id: int, issued_at: float) -> str:
    # admin id + issuance ms keeps ids readable; the random tail and the
    # unique constraint on token_id make collisions impossible to persist
    return f"{admin_id}_{int(issued_at * 1000)}_{secrets.token_hex(8)}"


def now_s() -> int:
    return int(time.time())
