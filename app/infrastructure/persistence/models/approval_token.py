"""Single-use token that lets the approver activate a pending account by link."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import SingleUseTokenMixin


class ApprovalToken(SingleUseTokenMixin, Base):
    """Table: approval_token. target_email is the approver the link was sent to."""

    __tablename__ = "approval_token"

    target_email: Mapped[str] = mapped_column(String, nullable=False)
