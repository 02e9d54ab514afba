import uuid

from sqlalchemy import Column, String, Integer, Date, DateTime, ForeignKey, Text
from sqlalchemy.orm import relationship

from petbook.database import Base
from petbook.utils.time import utcnow


class HealthRecord(Base):
    __tablename__ = "health_records"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    pet_id = Column(
        String,
        ForeignKey("pets.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    record_date = Column(Date, nullable=False)

    # vaccine | exam | consultation | medication | ...
    record_type = Column(String, nullable=False)
    title = Column(String, nullable=False)

    # Name from the vaccine / exam catalogue, when the record maps to one
    standardized_name = Column(String, nullable=True)

    notes = Column(Text, nullable=True)
    version = Column(Integer, nullable=False, default=1)

    created_at = Column(DateTime, default=utcnow, nullable=False)

    pet = relationship("Pet", back_populates="health_records")
