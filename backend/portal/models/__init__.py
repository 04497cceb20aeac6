from portal.models.chapter import Chapter
from portal.models.event import Event
from portal.models.metadata_document import MetadataDocument
from portal.models.opportunity import Opportunity
from portal.models.resource import Resource
from portal.models.user import User

__all__ = [
    "Chapter",
    "Event",
    "MetadataDocument",
    "Opportunity",
    "Resource",
    "User",
]
