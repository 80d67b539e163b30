# teamcode/models/member.py
from sqlalchemy import Column, Integer, String
from teamcode.models.base import Base

class Member(Base):
    """Author directory row. Owned by the surrounding dashboard; only read here."""
    __tablename__ = "members"

    id = Column(Integer, primary_key=True, index=True)
    team_id = Column(Integer, nullable=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, nullable=True)
