"""Organization model - the pharmacy profile printed on receipts."""
from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func
from pharmapos.database import Base

ORGANIZATION_ID = 1


class Organization(Base):
    """
    Single-row profile (id = ORGANIZATION_ID).

    Until the row exists the header comes from the ORGANIZATION_* settings.
    """

    __tablename__ = 'organization'

    id = Column(Integer, primary_key=True)
    name = Column(String(200), nullable=False)
    description = Column(String(500), nullable=True)
    address = Column(String(300), nullable=True)
    phone = Column(String(50), nullable=True)
    email = Column(String(255), nullable=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    def to_dict(self):
        return {
            'name': self.name,
            'description': self.description or '',
            'address': self.address or '',
            'phone': self.phone or '',
            'email': self.email or '',
        }

    def __repr__(self):
        return f"<Organization(name='{self.name}')>"
