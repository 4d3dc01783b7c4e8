# Services package init
"""
École API — Services Layer
===========================

What:  Gateways that turn validated requests into provider calls.
Why:   Routes handle HTTP; services own the filter chains, ownership scopes,
       reshaping and error translation. Services receive the provider
       client per call, so tests can pass a fake one directly.

Service Inventory:
    - AuthService:    login, student registration, password reset
    - UserService:    admin create/list/update/disable (+ audit)
    - ClasseService:  classes and their students
    - CoursService:   teacher-scoped course CRUD
    - AuditRecorder:  append-only `user_audit` writes
    - DriveService:   Drive upload/delete with READY/DISABLED status
    - provider/scoped helpers: error mapping and owner-scoped mutations
"""
