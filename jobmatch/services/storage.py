"""
Résumé file storage on a GridFS bucket next to the document database.
"""
from typing import List, Optional

import motor.motor_asyncio
from bson import ObjectId

from jobmatch.services.db import db
from jobmatch.utils.exceptions import StorageError
from jobmatch.utils.logging_config import get_logger

logger = get_logger(__name__)

BUCKET_NAME = "resumes"

_bucket: Optional[motor.motor_asyncio.AsyncIOMotorGridFSBucket] = None


def get_bucket() -> motor.motor_asyncio.AsyncIOMotorGridFSBucket:
    global _bucket
    if _bucket is None:
        _bucket = motor.motor_asyncio.AsyncIOMotorGridFSBucket(db, bucket_name=BUCKET_NAME)
    return _bucket


async def upload_file(file_name: str, data: bytes, content_type: str, owner_id: str) -> str:
    try:
        file_id = await get_bucket().upload_from_stream(
            file_name,
            data,
            metadata={"content_type": content_type, "owner_id": owner_id},
        )
    except Exception as e:
        raise StorageError("Failed to upload file", file_name=file_name, cause=e)
    logger.info(f"Stored {file_name} ({len(data)} bytes) as {file_id}")
    return str(file_id)


async def delete_file(file_id: str) -> None:
    try:
        await get_bucket().delete(ObjectId(file_id))
    except Exception as e:
        raise StorageError("Failed to delete file", file_name=file_id, cause=e)
    logger.info(f"Deleted stored file {file_id}")


async def list_files(limit: int = 1) -> List[str]:
    cursor = get_bucket().find({}, limit=limit)
    files = await cursor.to_list(length=limit)
    return [f.filename for f in files]
