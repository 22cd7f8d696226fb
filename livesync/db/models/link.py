from sqlalchemy import Column, String, Text

from livesync.db.base import BaseModel


class Link(BaseModel):
    __tablename__ = "links"

    title = Column(String(255), nullable=False)
    url = Column(Text, nullable=False)
