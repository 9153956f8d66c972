"""
Back Office API - Routes Package
=================================

Route Inventory:
    - practice_information.py:  GET/PUT /api/practiceInformation
    - upload.py:                POST    /api/upload
    - blobs.py:                 GET     /api/blobs/{container}/{blob_name}
    - templates.py:             GET     /api/templates
                                GET     /api/templates/preview?title=
    - health.py:                GET     /health

Routes stay thin: extract request data, call a service, return its result.
Errors are raised, never formatted here; app.main owns the mapping to
status codes.
"""
