# SQLAlchemy read models
from .base import Base
from .content import ContentItemRecord, GrammarFeatureRecord

__all__ = [
    "Base",
    "ContentItemRecord",
    "GrammarFeatureRecord",
]
