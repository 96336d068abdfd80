"""Metadata and record services built on the request dispatcher."""

from hclient.services.metadata import MetadataService
from hclient.services.records import MAX_BATCH_SIZE, RecordService

__all__ = ["MAX_BATCH_SIZE", "MetadataService", "RecordService"]
