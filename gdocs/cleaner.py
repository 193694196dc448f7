"""
In-place markdown cleanup of a Google Doc.

One-shot entry point: resolve the document from a link, make sure the
connected account can edit it, then format every paragraph in a single
transactional plan submitted in chunks.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any

from core.errors import NoEditAccessError
from core.utils import extract_document_id, handle_http_errors
from gdocs.docs_adapter import GoogleDocsAdapter

logger = logging.getLogger(__name__)

DRIVE_ACCESS_FIELDS = "id,name,capabilities(canEdit,canShare),ownedByMe,permissions(id,type,role)"


@dataclass
class DriveFileAccess:
    """What the connected account may do with a Drive file."""

    id: str
    name: str | None = None
    can_edit: bool = False
    can_share: bool = False
    owned_by_me: bool = False
    permissions: list[dict[str, Any]] = field(default_factory=list)


@handle_http_errors("get_drive_file_access", is_read_only=True)
async def get_drive_file_access(drive_service: Any, document_id: str) -> DriveFileAccess:
    """
    Read the capabilities of the connected account on a file.

    Args:
        drive_service: Google Drive API service instance
        document_id: Drive file ID of the document

    Returns:
        DriveFileAccess for the file
    """
    file = await asyncio.to_thread(
        drive_service.files().get(fileId=document_id, fields=DRIVE_ACCESS_FIELDS, supportsAllDrives=True).execute
    )
    file = file or {}
    capabilities = file.get("capabilities") or {}
    permissions = file.get("permissions")
    return DriveFileAccess(
        id=file.get("id", document_id),
        name=file.get("name"),
        can_edit=bool(capabilities.get("canEdit")),
        can_share=bool(capabilities.get("canShare")),
        owned_by_me=bool(file.get("ownedByMe")),
        permissions=permissions if isinstance(permissions, list) else [],
    )


async def check_edit_access(drive_service: Any, document_id: str) -> DriveFileAccess:
    """
    Ensure the connected account can edit the document.

    Raises:
        NoEditAccessError: If the file is readable but not editable
    """
    access = await get_drive_file_access(drive_service, document_id=document_id)
    if not access.can_edit:
        logger.warning(f"[check_edit_access] No edit access to {document_id} ({access.name})")
        raise NoEditAccessError(
            file_id=access.id,
            name=access.name,
            can_edit=access.can_edit,
            can_share=access.can_share,
            owned_by_me=access.owned_by_me,
        )
    return access


async def clean_document_in_place(
    docs_service: Any,
    drive_service: Any,
    doc_url: str,
    chunk_size: int | None = None,
) -> dict[str, Any]:
    """
    Convert the markdown markup of a Google Doc into native formatting.

    Args:
        docs_service: Google Docs API service instance
        drive_service: Google Drive API service instance
        doc_url: Document link or bare document ID
        chunk_size: Requests per batchUpdate call (configured default if None)

    Returns:
        dict with 'updated', 'request_count' and 'chunks'
    """
    document_id = extract_document_id(doc_url)
    logger.info(f"[clean_document_in_place] Doc={document_id}")

    await check_edit_access(drive_service, document_id)

    adapter = GoogleDocsAdapter(docs_service, document_id, chunk_size=chunk_size)
    await adapter.load()
    ops = adapter.plan_ops()
    if not ops:
        logger.info(f"[clean_document_in_place] Doc={document_id}: nothing to format")
        return {"updated": False, "request_count": 0, "chunks": 0}

    result = await adapter.submit(ops)
    return {"updated": True, "request_count": result.request_count, "chunks": result.chunks}
