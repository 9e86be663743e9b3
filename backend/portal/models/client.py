"""Client ORM model."""
from sqlalchemy import Column, Integer, String, Boolean
from portal.database import Base


class Client(Base):
    __tablename__ = "client"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    address = Column(String(500), nullable=True)
    phone_number = Column(String(50), nullable=True)
    email = Column(String(255), nullable=True)
    discount_flag = Column(Boolean, nullable=True)
