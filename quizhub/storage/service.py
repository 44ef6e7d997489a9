"""
Local filesystem object storage.

Objects live at UPLOAD_DIR/<bucket>/<path>; a StoredObject row records the
owner, content type and size. Uploads never overwrite an existing object.
"""
import os

from flask import current_app, url_for
from sqlalchemy.exc import IntegrityError
from werkzeug.utils import secure_filename

from quizhub import db
from quizhub.config import config
from quizhub.errors import (
    AccessDeniedError,
    AuthenticationError,
    ConflictError,
    NotFoundError,
    PayloadTooLargeError,
    ValidationError,
)
from quizhub.security import SecurityLogger
from quizhub.storage.buckets import get_bucket
from quizhub.storage.models import StoredObject

RESOURCE_EXISTS = "The resource already exists"


def normalize_path(path: str) -> str:
    """
    Make an object path safe to join under the bucket directory.

    Each segment goes through secure_filename; empty, "." and ".."
    segments are rejected outright.
    """
    if not path or '\\' in path or '\x00' in path or path.startswith('/'):
        raise ValidationError("Invalid object path")

    segments = []
    for segment in path.split('/'):
        if segment in ('', '.', '..'):
            raise ValidationError("Invalid object path")
        cleaned = secure_filename(segment)
        if not cleaned:
            raise ValidationError("Invalid object path")
        segments.append(cleaned)
    return '/'.join(segments)


def _disk_path(bucket_name: str, path: str) -> str:
    root = os.path.abspath(os.path.join(config.UPLOAD_DIR, bucket_name))
    full_path = os.path.abspath(os.path.join(root, *path.split('/')))
    if os.path.commonpath([root, full_path]) != root:
        raise ValidationError("Invalid object path")
    return full_path


def _public_url(bucket_name: str, path: str) -> str:
    return url_for('storage.download_object', bucket_name=bucket_name, path=path)


def _find(bucket_name: str, path: str) -> StoredObject | None:
    return StoredObject.query.filter_by(bucket=bucket_name, path=path).first()


def upload_object(caller, bucket_name: str, path: str, file) -> dict:
    bucket = get_bucket(bucket_name)
    path = normalize_path(path)

    allowed = bucket.can_write(caller, path)
    SecurityLogger.log_storage_access(bucket.name, path, caller.id, 'upload', allowed)
    if not allowed:
        raise AccessDeniedError()

    if file is None:
        raise ValidationError("No file provided")
    content_type = (file.mimetype or '').lower()
    if not bucket.allows_type(content_type):
        raise ValidationError(f"Content type {content_type or 'unknown'} is not allowed in bucket {bucket.name}")

    data = file.stream.read(bucket.max_size + 1)
    if len(data) > bucket.max_size:
        raise PayloadTooLargeError("The object exceeded the maximum allowed size")

    if _find(bucket.name, path) is not None:
        raise ConflictError(RESOURCE_EXISTS)

    full_path = _disk_path(bucket.name, path)
    os.makedirs(os.path.dirname(full_path), exist_ok=True)
    try:
        with open(full_path, 'xb') as out:
            out.write(data)
    except FileExistsError:
        raise ConflictError(RESOURCE_EXISTS)

    stored = StoredObject(
        bucket=bucket.name,
        path=path,
        owner_id=caller.id,
        content_type=content_type,
        size=len(data),
    )
    db.session.add(stored)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        os.remove(full_path)
        raise ConflictError(RESOURCE_EXISTS)

    current_app.logger.info(f"Stored {bucket.name}/{path} ({len(data)} bytes) for user {caller.id}")
    result = stored.to_dict()
    result['url'] = _public_url(bucket.name, path)
    return result


def get_public_url(bucket_name: str, path: str) -> dict:
    bucket = get_bucket(bucket_name)
    path = normalize_path(path)
    if not bucket.public:
        raise ValidationError(f"Bucket {bucket.name} is not public")
    return {'publicUrl': _public_url(bucket.name, path)}


def open_object(caller, bucket_name: str, path: str) -> tuple[str, StoredObject]:
    """Resolve a readable object to its file on disk."""
    bucket = get_bucket(bucket_name)
    path = normalize_path(path)

    allowed = bucket.can_read(caller, path)
    if not bucket.public:
        SecurityLogger.log_storage_access(bucket.name, path, caller.id if caller else None, 'download', allowed)
    if not allowed:
        if caller is None:
            raise AuthenticationError("Authentication required")
        raise AccessDeniedError()

    stored = _find(bucket.name, path)
    full_path = _disk_path(bucket.name, path)
    if stored is None or not os.path.isfile(full_path):
        raise NotFoundError("Object not found")
    return full_path, stored


def delete_object(caller, bucket_name: str, path: str) -> None:
    bucket = get_bucket(bucket_name)
    path = normalize_path(path)

    allowed = bucket.can_write(caller, path)
    SecurityLogger.log_storage_access(bucket.name, path, caller.id, 'delete', allowed)
    if not allowed:
        raise AccessDeniedError()

    stored = _find(bucket.name, path)
    if stored is None:
        raise NotFoundError("Object not found")

    db.session.delete(stored)
    db.session.commit()
    try:
        os.remove(_disk_path(bucket.name, path))
    except FileNotFoundError:
        current_app.logger.warning(f"Stored object {bucket.name}/{path} had no file on disk")
