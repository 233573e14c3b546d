# Services package init
"""
ParcelTrack Backend — Services Layer
=====================================

What:  Business logic layer sitting between routes (HTTP) and the record store.
How:   Services accept schema objects, apply the package rules, and return
       records. Routes obtain them through FastAPI's dependency injection.

Service Inventory:
    - PackageService: create / list / get / update over a RecordStore
    - FileService: photo upload validation, storage, and cleanup
"""
