"""Batch secret synchronization engine.

This package provides the pipeline that turns CSV rows into Vault secrets:
- Normalize: derive store-safe path and name segments from column text
- Translate: build one secret record (path + fields) per row
- Process: apply upserts or deletes for every row of one source
- Coordinate: fan out across sources and fold outcomes into a report
"""
