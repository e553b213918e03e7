"""
Visitors table — every plate allowed through the gate and the name linked to it.
plate carries a unique index so concurrent creates of the same plate cannot both land.
On MySQL the plate column uses a binary collation: plates are case-sensitive identities.
"""

from sqlalchemy import Column, Integer, String
from sqlalchemy.dialects import mysql
from gatekeeper.database import Base

PlateType = String(50).with_variant(mysql.VARCHAR(50, collation="utf8mb4_bin"), "mysql")


class Visitor(Base):
    __tablename__ = "visitors"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    plate = Column(PlateType, unique=True, nullable=False, index=True)

    def __repr__(self):
        return f"<Visitor {self.plate} name={self.name}>"
