# moodlog/db/models.py
from sqlalchemy import Column, Float, Integer, String
from sqlalchemy.orm import declarative_base

Base = declarative_base()

class SampleModel(Base):
    __tablename__ = "samples"
    # AUTOINCREMENT keeps ids strictly increasing even after deletes
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    ts = Column(String, nullable=False)
    mood = Column(Integer, nullable=False)
    videoUri = Column(String, nullable=False)
    lat = Column(Float, nullable=False)
    lng = Column(Float, nullable=False)
