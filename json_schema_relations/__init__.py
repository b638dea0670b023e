"""Core logic for the Schema Relationship Dashboard.

The Gradio UI lives in `app.py`. This package contains the pieces it drives:
- field extraction from uploaded JSON schemas
- the schema / relationship / loaded-data context and its persistence
- relationship matching over loaded records
- registered record sources for generated datasets
"""
