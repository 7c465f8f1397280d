"""Object store boundary: port protocol, DTOs and SDK adapters.

SDK adapters are not re-exported here so that importing the port does not
require boto3 or google-cloud-storage.
"""

from cloudstore._store.dtos import RawBucket, RawObject
from cloudstore._store.ports import ObjectReader, ObjectStorePort, ObjectWriter
from cloudstore._store.streams import BufferedObjectWriter, StreamObjectReader

__all__ = [
    "BufferedObjectWriter",
    "ObjectReader",
    "ObjectStorePort",
    "ObjectWriter",
    "RawBucket",
    "RawObject",
    "StreamObjectReader",
]
