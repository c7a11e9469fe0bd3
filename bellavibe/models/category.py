"""Category model - two-level hierarchy of sessions and categories."""
import enum

from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship
from bellavibe.database import Base


class CategoryKind(str, enum.Enum):
    """A top-level session or a category nested under one."""
    SESSION = 'session'
    CATEGORY = 'category'


class Category(Base):
    """Product category.

    A row without ``parent_id`` is a session; a row with one is a category
    whose parent must be a session. Deeper nesting is rejected by
    ``category_service``.
    """

    __tablename__ = 'categories'

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(120), nullable=False)
    parent_id = Column(Integer, ForeignKey('categories.id'), nullable=True)

    # Relationships
    parent = relationship('Category', remote_side=[id], back_populates='children')
    children = relationship('Category', back_populates='parent')
    products = relationship('Product', back_populates='category')

    @property
    def kind(self):
        if self.parent_id is None:
            return CategoryKind.SESSION
        return CategoryKind.CATEGORY

    @property
    def is_session(self):
        return self.kind is CategoryKind.SESSION

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'parent_id': self.parent_id,
            'kind': self.kind.value,
        }

    def __repr__(self):
        return f"<Category(id={self.id}, name='{self.name}', kind={self.kind.value})>"
