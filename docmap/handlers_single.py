from __future__ import annotations

import logging
import os
from typing import Any, Dict, List, Optional

import gradio as gr

from .config import get_settings
from .errors import DocumentError
from .flattening import project_rows, to_csv
from .io_utils import documents_at, read_content
from .schema_utils import build_tree_from_keys, collect_keys, find_list_pointers

logger = logging.getLogger(__name__)

ROOT_LABEL = '(root)'


def pointer_from_choice(choice: Optional[str]) -> str:
    if choice in (None, '', ROOT_LABEL):
        return ''
    return choice


def choice_from_pointer(pointer: str) -> str:
    return pointer or ROOT_LABEL


def resolve_separator(separator: Optional[str]) -> str:
    if separator:
        return separator.replace('\\t', '\t')
    return get_settings().csv_separator


def prepare_dataset_payload(file_obj):
    if file_obj is None:
        return None, gr.update(choices=[ROOT_LABEL], value=ROOT_LABEL), "No file uploaded."

    try:
        data = read_content(file_obj)
    except (DocumentError, ValueError, OSError) as e:
        logger.warning("failed to load dataset: %s", e)
        return None, gr.update(choices=[ROOT_LABEL], value=ROOT_LABEL), f"Error parsing file: {str(e)}"

    pointers = [choice_from_pointer(p) for p in find_list_pointers(data)]
    if not pointers:
        pointers = [ROOT_LABEL]

    default_choice = ROOT_LABEL if ROOT_LABEL in pointers else pointers[0]
    return data, gr.update(choices=pointers, value=default_choice), "Successfully loaded."


def compute_document_count_text(data: Any, choice: Optional[str] = ROOT_LABEL) -> str:
    if data is None:
        return ""
    try:
        documents = documents_at(data, pointer_from_choice(choice))
    except DocumentError as e:
        return f"Cannot use this pointer: {e}"
    return f"Documents: {len(documents)}"


def header_tree(data: Any, choice: Optional[str] = ROOT_LABEL) -> Optional[Dict[str, Any]]:
    """Columns a table export would have, nested by dotted key."""
    if data is None:
        return None
    try:
        documents = documents_at(data, pointer_from_choice(choice))
    except DocumentError:
        return None
    if not documents:
        return None
    return build_tree_from_keys(sorted(collect_keys(documents[0])))


def load_and_parse_with_preview(file_obj):
    data, pointer_dropdown, message = prepare_dataset_payload(file_obj)
    if data is None:
        return None, pointer_dropdown, message, None, ""

    choice = pointer_dropdown.get("value") if isinstance(pointer_dropdown, dict) else ROOT_LABEL
    return data, pointer_dropdown, message, header_tree(data, choice), compute_document_count_text(data, choice)


def handle_pointer_change(data: Any, choice: str):
    return compute_document_count_text(data, choice), header_tree(data, choice), None


def preview_table_handler(data, choice=None, separator=None):
    if data is None:
        return None, "No data loaded."

    limit = get_settings().preview_rows
    try:
        documents = documents_at(data, pointer_from_choice(choice))
        header, rows = project_rows(documents[:limit], resolve_separator(separator))
    except DocumentError as e:
        logger.warning("preview failed: %s", e)
        return None, f"Error building table: {str(e)}"

    preview: List[Dict[str, str]] = [dict(zip(header, cells)) for cells in rows]
    return preview, f"Previewing {len(preview)} of {len(documents)} documents."


def export_table_handler(data, choice=None, separator=None, file_name=None):
    if data is None:
        return None, "No data loaded."

    try:
        documents = documents_at(data, pointer_from_choice(choice))
        output = to_csv(documents, resolve_separator(separator))
    except DocumentError as e:
        logger.warning("export failed: %s", e)
        return None, f"Error building table: {str(e)}"

    if not file_name or not file_name.strip():
        file_name = "output"
    file_name = file_name.strip()
    if not file_name.lower().endswith('.csv'):
        file_name += '.csv'

    path = os.path.join(get_settings().export_dir, os.path.basename(file_name))

    try:
        with open(path, 'wb') as f:
            f.write(output)
    except OSError as e:
        logger.warning("writing %s failed: %s", path, e)
        return None, f"Error during export: {str(e)}"

    return path, f"Export successful! {len(documents)} rows saved to {path}"
