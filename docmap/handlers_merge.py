from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional, Tuple
from uuid import uuid4

from .config import get_settings
from .document import Document
from .errors import DocumentError
from .io_utils import read_content

logger = logging.getLogger(__name__)

APPLY_PATCH = "Apply second as merge patch"
CREATE_PATCH = "Create merge patch (original -> second)"
MODES = [APPLY_PATCH, CREATE_PATCH]


def handle_document_upload(file_obj, label_prefix: str):
    if file_obj is None:
        return None, f"{label_prefix}: No file uploaded."

    try:
        doc = Document.normalize(read_content(file_obj))
    except (DocumentError, ValueError, OSError) as e:
        logger.warning("%s upload failed: %s", label_prefix, e)
        return None, f"{label_prefix}: Error parsing file: {str(e)}"

    return doc.data, f"{label_prefix}: Successfully loaded. Found {len(doc)} top-level keys."


def handle_original_upload(file_obj):
    return handle_document_upload(file_obj, "Original document")


def handle_second_upload(file_obj):
    return handle_document_upload(file_obj, "Second document")


def perform_merge(original_data, second_data, mode: str) -> Tuple[Document, str]:
    if original_data is None or second_data is None:
        raise ValueError("Upload both documents first.")

    # Work on copies so the uploaded state stays untouched.
    original = Document.normalize(original_data).copy()
    second = Document.normalize(second_data).copy()

    if mode == CREATE_PATCH:
        patch = original.create_merge_patch(second)
        return patch, f"Patch touches {len(patch)} top-level keys."

    original.apply_merge_patch(second)
    return original, f"Patched document has {len(original)} top-level keys."


def merge_patch_handler(original_data, second_data, mode: Optional[str], file_name: Optional[str]):
    try:
        result, summary = perform_merge(original_data, second_data, mode or APPLY_PATCH)
    except (DocumentError, ValueError) as exc:
        logger.warning("merge patch failed: %s", exc)
        return None, str(exc), None

    output_name = (file_name or f"merged_{uuid4().hex}").strip()
    if not output_name.lower().endswith('.json'):
        output_name += '.json'

    path = os.path.join(get_settings().export_dir, os.path.basename(output_name))

    try:
        with open(path, 'wb') as f:
            f.write(result.to_bytes())
    except OSError as exc:
        logger.warning("writing %s failed: %s", path, exc)
        return None, f"Error writing merged file: {str(exc)}", None

    preview: Dict[str, Any] = result.to_plain()
    return path, f"{summary} Digest: {result.digest().hex()[:16]}", preview
