"""
ParcelTrack Backend — Application Package Initializer
=====================================================

What: Marks the `parceltrack` directory as a Python package.
Who:  Imported by uvicorn (`parceltrack.main:app`), pytest, and every module here.

Architecture Note:
    The backend is split into thin layers:

    ┌─────────────────────────────────────┐
    │      Routes (API + HTML pages)      │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │      Services (Business Logic)      │  ← presence checks, merge, uploads
    ├─────────────────────────────────────┤
    │            Schemas (Data)           │  ← Pydantic record models
    ├─────────────────────────────────────┤
    │       Record Store (Persistence)    │  ← whole-file JSON read/write
    └─────────────────────────────────────┘

    Every mutation is a whole-collection read-modify-write against the
    record store; there is no per-record persistence.
"""

__version__ = "1.0.0"
