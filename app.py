import logging

import gradio as gr

from docmap.config import get_settings
from docmap.handlers_single import (
    ROOT_LABEL,
    export_table_handler,
    handle_pointer_change,
    load_and_parse_with_preview,
    preview_table_handler,
)
from docmap.handlers_merge import (
    APPLY_PATCH,
    MODES,
    handle_original_upload,
    handle_second_upload,
    merge_patch_handler,
)

settings = get_settings()

if not logging.getLogger().handlers:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )

# --- UI Definition ---
with gr.Blocks(title="docmap") as demo:
    gr.Markdown("# docmap: nested documents to tables")
    gr.Markdown("Upload JSON or YAML documents, export them as a delimited table, or diff and patch them.")

    # State
    table_data_state = gr.State()
    merge_original_state = gr.State()
    merge_second_state = gr.State()

    with gr.Tab("Table Export"):
        with gr.Row():
            # Left Panel: Input & Columns
            with gr.Column(scale=1):
                gr.Markdown("### 1. Import")
                file_input = gr.File(label="Upload JSON or YAML File", file_types=[".json", ".yaml", ".yml"])
                status_msg = gr.Textbox(label="Status", interactive=False)
                document_count = gr.Textbox(label="Document Count", interactive=False)

                gr.Markdown("### 2. Columns")
                gr.Markdown("Columns come from the first document; every later one must fit them.")
                columns_view = gr.JSON(label="Header (nested by dotted key)")

            # Right Panel: Output Builder
            with gr.Column(scale=1):
                gr.Markdown("### 3. Output Builder")
                pointer_selector = gr.Dropdown(
                    label="Documents Pointer (JSONPointer of the document list)",
                    choices=[ROOT_LABEL],
                    value=ROOT_LABEL,
                    allow_custom_value=True,
                    interactive=True,
                )
                separator_input = gr.Textbox(label="Separator", value=settings.csv_separator, max_lines=1)

                gr.Markdown("### 4. Export")
                output_filename = gr.Textbox(label="Output Filename (optional)", placeholder="output")
                load_preview_btn = gr.Button("Load Preview")
                export_btn = gr.Button("Export CSV", variant="primary")
                download_output = gr.File(label="Download Result")
                table_preview = gr.JSON(label=f"Preview (first {settings.preview_rows} rows)")

        file_input.upload(
            fn=load_and_parse_with_preview,
            inputs=[file_input],
            outputs=[table_data_state, pointer_selector, status_msg, columns_view, document_count],
        )

        pointer_selector.change(
            fn=handle_pointer_change,
            inputs=[table_data_state, pointer_selector],
            outputs=[document_count, columns_view, table_preview],
        )

        load_preview_btn.click(
            fn=preview_table_handler,
            inputs=[table_data_state, pointer_selector, separator_input],
            outputs=[table_preview, status_msg],
        )

        export_btn.click(
            fn=export_table_handler,
            inputs=[table_data_state, pointer_selector, separator_input, output_filename],
            outputs=[download_output, status_msg],
        )

    with gr.Tab("Merge Patch"):
        gr.Markdown("### 1. Upload both documents")
        with gr.Row():
            with gr.Column():
                original_file = gr.File(label="Original Document", file_types=[".json", ".yaml", ".yml"])
                original_status = gr.Textbox(label="Original Status", interactive=False)
            with gr.Column():
                second_file = gr.File(label="Patch or Changed Document", file_types=[".json", ".yaml", ".yml"])
                second_status = gr.Textbox(label="Second Status", interactive=False)

        gr.Markdown("### 2. Configure")
        mode_selector = gr.Radio(choices=MODES, value=APPLY_PATCH, label="Operation")
        merge_filename = gr.Textbox(label="Output Filename", placeholder="merged_output.json")

        gr.Markdown("### 3. Run & export")
        merge_btn = gr.Button("Run & Download", variant="primary")
        merge_download = gr.File(label="Result")
        merge_status = gr.Textbox(label="Status", interactive=False)
        merge_preview = gr.JSON(label="Result Preview")

        original_file.upload(
            fn=handle_original_upload,
            inputs=[original_file],
            outputs=[merge_original_state, original_status],
        )

        second_file.upload(
            fn=handle_second_upload,
            inputs=[second_file],
            outputs=[merge_second_state, second_status],
        )

        merge_btn.click(
            fn=merge_patch_handler,
            inputs=[merge_original_state, merge_second_state, mode_selector, merge_filename],
            outputs=[merge_download, merge_status, merge_preview],
        )

if __name__ == "__main__":
    demo.launch(server_name=settings.server_name, server_port=settings.server_port)
