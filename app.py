import logging
from functools import partial

import gradio as gr

from json_schema_relations.config import AppConfig, build_store, configure_logging
from json_schema_relations.context import DataContext
from json_schema_relations.handlers_data import (
    clear_data_handler,
    load_data_handler,
    run_source_handler,
    upload_records_handler,
)
from json_schema_relations.handlers_relationships import (
    RELATIONSHIP_TABLE_HEADERS,
    RELATIONSHIP_TYPES,
    add_relationship_handler,
    refresh_relationship_tab,
    remove_relationship_handler,
)
from json_schema_relations.handlers_schemas import (
    FIELD_TABLE_HEADERS,
    SCHEMA_TABLE_HEADERS,
    add_schema_handler,
    load_schema_file_handler,
    remove_schema_handler,
    schema_choices,
    schema_detail_handler,
    schema_dropdown_update,
    schema_table,
)
from json_schema_relations.handlers_visualization import (
    MATCH_TABLE_HEADERS,
    RELATIONSHIP_SUMMARY_HEADERS,
    STRUCTURE_TABLE_HEADERS,
    dashboard_summary,
    refresh_dataset_dropdown,
    show_dataset_handler,
)
from json_schema_relations.record_sources import RecordSourceRegistry, default_registry

logger = logging.getLogger(__name__)


def build_app(context: DataContext, registry: RecordSourceRegistry, config: AppConfig) -> gr.Blocks:
    # --- UI Definition ---
    with gr.Blocks(title="Schema Relationship Dashboard") as demo:
        gr.Markdown("# Schema Relationship Dashboard")
        gr.Markdown("Upload JSON schemas, link their fields, load datasets and inspect relationship matches.")

        # Records waiting to be loaded into a schema
        pending_records_state = gr.State(value=[])

        with gr.Tab("Dashboard") as dashboard_tab:
            summary_md = gr.Markdown(dashboard_summary(context))

        with gr.Tab("Schemas") as schemas_tab:
            with gr.Row():
                # Left Panel: Upload
                with gr.Column(scale=1):
                    gr.Markdown("### 1. Add a schema")
                    schema_file = gr.File(label="Upload JSON File", file_types=[".json"])
                    schema_name = gr.Textbox(label="Schema Name")
                    schema_content = gr.Code(label="JSON Schema Content", language="json")
                    add_schema_btn = gr.Button("Add Schema", variant="primary")
                    schema_status = gr.Textbox(label="Status", interactive=False)

                # Right Panel: Browse
                with gr.Column(scale=1):
                    gr.Markdown("### 2. Uploaded schemas")
                    schema_list = gr.Dataframe(
                        headers=SCHEMA_TABLE_HEADERS,
                        value=schema_table(context),
                        interactive=False,
                        label="Schemas",
                    )
                    schema_selector = gr.Dropdown(label="Schema", choices=schema_choices(context), value=None)
                    delete_schema_btn = gr.Button("Delete Schema", variant="stop")
                    field_list = gr.Dataframe(headers=FIELD_TABLE_HEADERS, interactive=False, label="Fields")
                    with gr.Accordion("Field tree", open=False):
                        field_tree = gr.JSON(label="Field tree")
                    with gr.Accordion("Raw content", open=False):
                        raw_content = gr.JSON(label="Content")

        with gr.Tab("Relationships") as relationships_tab:
            with gr.Row():
                with gr.Column(scale=1):
                    gr.Markdown("### Create a relationship")
                    source_field = gr.Dropdown(label="Source Field", choices=[], value=None)
                    target_field = gr.Dropdown(label="Target Field", choices=[], value=None)
                    relationship_name = gr.Textbox(label="Relationship Name")
                    relationship_type = gr.Radio(
                        choices=RELATIONSHIP_TYPES, value=RELATIONSHIP_TYPES[0], label="Relationship Type"
                    )
                    relationship_description = gr.Textbox(label="Description (optional)")
                    add_relationship_btn = gr.Button("Create Relationship", variant="primary")
                    relationship_status = gr.Textbox(label="Status", interactive=False)
                with gr.Column(scale=1):
                    gr.Markdown("### Existing relationships")
                    relationship_list = gr.Dataframe(
                        headers=RELATIONSHIP_TABLE_HEADERS, interactive=False, label="Relationships"
                    )
                    relationship_selector = gr.Dropdown(label="Relationship", choices=[], value=None)
                    delete_relationship_btn = gr.Button("Delete Relationship", variant="stop")

        with gr.Tab("Data Loading") as data_tab:
            with gr.Row():
                with gr.Column(scale=1):
                    gr.Markdown("### 1. Target schema")
                    data_schema_selector = gr.Dropdown(label="Schema", choices=[], value=None)

                    gr.Markdown("### 2. Records")
                    with gr.Tab("File Upload"):
                        data_file = gr.File(label="Upload JSON Data", file_types=[".json"])
                    with gr.Tab("Record Source"):
                        source_selector = gr.Dropdown(
                            label="Registered Source", choices=registry.names(), value=None
                        )
                        run_source_btn = gr.Button("Generate Records")
                    data_status = gr.Textbox(label="Status", interactive=False)
                with gr.Column(scale=1):
                    gr.Markdown("### 3. Load")
                    records_preview = gr.JSON(label="Preview (first 3 records)")
                    load_btn = gr.Button("Load Data", variant="primary")
                    clear_btn = gr.Button("Clear All Loaded Data", variant="stop")
                    load_status = gr.Textbox(label="Load Status", interactive=False)

        with gr.Tab("Visualization") as visualization_tab:
            dataset_selector = gr.Dropdown(label="Loaded Dataset", choices=[], value=None)
            dataset_stats = gr.Markdown("Select a loaded dataset.")
            with gr.Row():
                with gr.Column(scale=1):
                    dataset_records = gr.JSON(label="Records (first 5)")
                with gr.Column(scale=1):
                    structure_table = gr.Dataframe(
                        headers=STRUCTURE_TABLE_HEADERS, interactive=False, label="Schema Structure"
                    )
            relationship_summary = gr.Dataframe(
                headers=RELATIONSHIP_SUMMARY_HEADERS, interactive=False, label="Relationships"
            )
            match_table = gr.Dataframe(headers=MATCH_TABLE_HEADERS, interactive=False, label="Matches")

        # --- Events ---
        dashboard_tab.select(fn=partial(dashboard_summary, context), outputs=[summary_md])

        schemas_tab.select(
            fn=lambda current: (schema_table(context), schema_dropdown_update(context, current)),
            inputs=[schema_selector],
            outputs=[schema_list, schema_selector],
        )

        schema_file.upload(
            fn=load_schema_file_handler,
            inputs=[schema_file],
            outputs=[schema_name, schema_content, schema_status],
        )

        add_schema_btn.click(
            fn=partial(add_schema_handler, context),
            inputs=[schema_name, schema_content],
            outputs=[schema_status, schema_name, schema_content, schema_list, schema_selector],
        )

        schema_selector.change(
            fn=partial(schema_detail_handler, context),
            inputs=[schema_selector],
            outputs=[field_list, field_tree, raw_content],
        )

        delete_schema_btn.click(
            fn=partial(remove_schema_handler, context),
            inputs=[schema_selector],
            outputs=[schema_status, schema_list, schema_selector, field_list, field_tree, raw_content],
        )

        relationships_tab.select(
            fn=partial(refresh_relationship_tab, context),
            outputs=[source_field, target_field, relationship_list, relationship_selector],
        )

        add_relationship_btn.click(
            fn=partial(add_relationship_handler, context),
            inputs=[relationship_name, source_field, target_field, relationship_type, relationship_description],
            outputs=[relationship_status, relationship_name, relationship_list, relationship_selector],
        )

        delete_relationship_btn.click(
            fn=partial(remove_relationship_handler, context),
            inputs=[relationship_selector],
            outputs=[relationship_status, relationship_list, relationship_selector],
        )

        data_tab.select(
            fn=lambda current: schema_dropdown_update(context, current),
            inputs=[data_schema_selector],
            outputs=[data_schema_selector],
        )

        data_file.upload(
            fn=upload_records_handler,
            inputs=[data_file],
            outputs=[pending_records_state, data_status, records_preview],
        )

        run_source_btn.click(
            fn=partial(run_source_handler, registry, config.record_source_timeout),
            inputs=[source_selector],
            outputs=[pending_records_state, data_status, records_preview],
        )

        load_btn.click(
            fn=partial(load_data_handler, context),
            inputs=[data_schema_selector, pending_records_state],
            outputs=[load_status],
        )

        clear_btn.click(
            fn=partial(clear_data_handler, context),
            outputs=[load_status, dataset_selector],
        )

        visualization_tab.select(
            fn=lambda current: refresh_dataset_dropdown(context, current),
            inputs=[dataset_selector],
            outputs=[dataset_selector],
        )

        dataset_selector.change(
            fn=partial(show_dataset_handler, context),
            inputs=[dataset_selector],
            outputs=[dataset_stats, dataset_records, relationship_summary, match_table, structure_table],
        )

    return demo


def main():
    config = AppConfig()
    configure_logging(config.log_level)
    context = DataContext.open(build_store(config))
    logger.info("Persisting to %s", config.data_dir if config.persist else "memory")
    demo = build_app(context, default_registry, config)
    demo.launch(server_name=config.server_name, server_port=config.server_port)


if __name__ == "__main__":
    main()
