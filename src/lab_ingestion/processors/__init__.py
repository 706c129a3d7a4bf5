# src/lab_ingestion/processors/__init__.py
