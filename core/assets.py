"""
Image asset storage for posts, events and user profiles.

An upload is written straight away and handed back as a PendingAsset.
The calling view then either commits it (the owning row was saved) or
releases it (the row write failed), so no file is left without an owner.
Replacing or deleting an owner removes the old file afterwards.
"""
import logging
import os
import re
import secrets
import time
from enum import Enum
from typing import Optional

from django.conf import settings
from django.core.files.storage import default_storage
from django.db import transaction

from .exceptions import FileTooLarge, InvalidFile, StorageError

logger = logging.getLogger("hub.assets")

DEFAULT_MAX_IMAGE_SIZE = 5 * 1024 * 1024
BASE_NAME_MAX_LENGTH = 20


class AssetKind(str, Enum):
    POSTS = "posts"
    EVENTS = "events"
    USERS = "users"

    @property
    def directory(self) -> str:
        dirs = getattr(settings, "IMAGE_UPLOAD_DIRS", {})
        return dirs.get(self.value, self.value)


def max_image_size() -> int:
    return getattr(settings, "MAX_IMAGE_UPLOAD_SIZE", DEFAULT_MAX_IMAGE_SIZE)


def validate_image(upload) -> None:
    """
    Only image/* content types, capped at MAX_IMAGE_UPLOAD_SIZE bytes.
    """
    content_type = getattr(upload, "content_type", None) or ""
    if not content_type.startswith("image/"):
        raise InvalidFile()

    limit = max_image_size()
    if upload.size > limit:
        raise FileTooLarge(f"File size too large. Maximum size is {limit // (1024 * 1024)}MB.")


def generate_filename(original_name: str) -> str:
    """
    <alnum base, truncated>-<ns timestamp>-<random><ext>
    """
    base, extension = os.path.splitext(os.path.basename(original_name or ""))
    safe_base = re.sub(r"[^a-zA-Z0-9]", "", base)[:BASE_NAME_MAX_LENGTH] or "image"
    extension = re.sub(r"[^a-zA-Z0-9.]", "", extension.lower())
    suffix = secrets.randbelow(10 ** 9)
    return f"{safe_base}-{time.time_ns()}-{suffix}{extension}"


def delete_asset(name: Optional[str]) -> bool:
    """
    Best-effort removal of a stored file. Never raises.
    Returns True when a file was actually deleted.
    """
    if not name:
        return False
    try:
        if default_storage.exists(name):
            default_storage.delete(name)
            logger.info(f"Asset deleted: {name}")
            return True
    except Exception as e:
        logger.warning(f"Failed to delete asset {name}: {e}")
    return False


def asset_url(name: Optional[str]) -> Optional[str]:
    if not name:
        return None
    try:
        return default_storage.url(name)
    except Exception:
        return None


class PendingAsset:
    """
    Handle for a file that is written but not yet owned by a saved row.

    Use as a context manager: leaving the block without commit() releases
    the file, so an exception anywhere in the entity write rolls the
    upload back.
    """

    def __init__(self, name: str, kind: AssetKind):
        self.name = name
        self.kind = kind
        self.committed = False
        self.released = False

    def commit(self) -> str:
        self.committed = True
        return self.name

    def release(self) -> None:
        if self.committed or self.released:
            return
        self.released = True
        delete_asset(self.name)
        logger.info(f"Pending asset released: {self.name}")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        if not self.committed:
            self.release()
        return False

    def __repr__(self):
        return f"PendingAsset({self.name!r}, committed={self.committed})"


def store_image(upload, kind: AssetKind) -> PendingAsset:
    """
    Validate and write an uploaded image under the directory for `kind`.
    """
    validate_image(upload)

    target = f"{kind.directory}/{generate_filename(upload.name)}"
    try:
        name = default_storage.save(target, upload)
    except Exception as e:
        logger.error(f"Failed to store upload {upload.name!r}: {e}")
        raise StorageError()

    logger.info(f"Asset stored: {name} ({upload.size} bytes)")
    return PendingAsset(name, kind)


class NoAsset:
    """
    Stand-in used when a request carries no file, so callers can always
    write `with pending:` / `pending.commit()`.
    """
    name = None
    committed = False

    def commit(self):
        return None

    def release(self):
        return None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False


def store_optional_image(upload, kind: AssetKind):
    if upload is None:
        return NoAsset()
    return store_image(upload, kind)


def delete_asset_on_commit(name: Optional[str]) -> None:
    """
    Remove a replaced or orphaned file once the surrounding transaction
    commits (immediately when there is none).
    """
    if name:
        transaction.on_commit(lambda: delete_asset(name))
