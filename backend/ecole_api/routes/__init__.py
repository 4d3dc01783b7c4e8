# Routes package init
"""
École API — API Routes Package
===============================

Route Inventory:
    - auth.py:    POST /api/auth/login | /register/eleve | /reset-password
    - users.py:   GET/POST /api/users, PUT/DELETE /api/users/{id}   (admin)
    - classes.py: GET/POST /api/classes, GET /api/classes/enseignant/{id},
                  GET /api/classes/{id}/eleves
    - cours.py:   GET/POST /api/cours, PUT/DELETE /api/cours/{id}   (enseignant)
    - files.py:   POST /api/upload, POST /api/delete-file
    - health.py:  GET /, GET /health

Routes stay THIN: authenticate via dependencies, call one service method,
return its result. Error responses come from the global handlers in main.py.
"""
