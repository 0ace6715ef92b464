from sqlalchemy import Column, Integer, String, TIMESTAMP
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from ..database import Base

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    # Subject issued by the external identity provider
    external_id = Column(String(255), unique=True, index=True, nullable=False)
    email = Column(String(255), nullable=True)
    name = Column(String(255), nullable=True)

    subscription_type = Column(String(20), nullable=False, default="FREE")
    platforms_linked = Column(Integer, nullable=False, default=0)

    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())

    platforms = relationship("LinkedPlatform", back_populates="user", cascade="all, delete-orphan")
