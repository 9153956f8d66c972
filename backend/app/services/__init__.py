"""
Back Office API - Services Layer
=================================

What:  Business logic between routes (HTTP) and persistence/storage.

Service Inventory:
    - practice_information_service: read and upsert of practice information
    - practice_information_store:   row access scoped by clinician id
    - clinician_service:            session → clinician resolution
    - phone_numbers:                phone number list ⇄ stored JSON text
    - blob_storage:                 BlobStorage interface + local backend
    - upload_service:               upload validation and storage hand-off
    - template_library:             built-in questionnaire template previews
"""
