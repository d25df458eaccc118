"""
FitLog Backend - Application Package Initializer
==================================================

HTTP glue between a fitness-log frontend, Google Sheets and Google Gemini.

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← LogService orchestration
    ├─────────────────────────────────────┤
    │   Google Sheets   │  Google Gemini  │  ← external systems of record
    └─────────────────────────────────────┘

The spreadsheet is the only durable store; nothing is persisted locally.
"""

__version__ = "1.0.0"
