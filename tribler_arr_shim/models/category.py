"""
Category catalog model.
"""
from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from tribler_arr_shim.database import Base


class Category(Base):
    """A qBittorrent category: a label plus the save path it stands for."""

    __tablename__ = "category"

    id = Column(Integer, primary_key=True, index=True)
    # Unique constraint makes concurrent createCategory calls collapse into one row
    name = Column(String(255), unique=True, nullable=False, index=True)
    save_path = Column("savePath", String(1024), nullable=False, default="")

    # Relationships
    torrents = relationship("Torrent", back_populates="category")

    def __repr__(self) -> str:
        return f"<Category {self.name!r} savePath={self.save_path!r}>"
