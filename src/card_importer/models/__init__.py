"""ORM models. Importing this package registers every table on Base.metadata."""

from card_importer.models.base import Base
from card_importer.models.import_job import ImportJob
from card_importer.models.listing import Listing

__all__ = ["Base", "ImportJob", "Listing"]
