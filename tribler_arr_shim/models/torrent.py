"""
Torrent to category association model.
"""
from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship
from tribler_arr_shim.database import Base


class Torrent(Base):
    """Locally known infohash and the category it was added under."""

    __tablename__ = "torrent"

    # Primary key doubles as the uniqueness guarantee: one category per hash
    hash = Column(String(64), primary_key=True)
    category_id = Column(Integer, ForeignKey("category.id"), nullable=False, index=True)

    # Relationships
    category = relationship("Category", back_populates="torrents")

    def __repr__(self) -> str:
        return f"<Torrent {self.hash} category_id={self.category_id}>"
