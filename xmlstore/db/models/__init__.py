from xmlstore.db.models.document import XmlDocument

__all__ = [
    "XmlDocument",
]
