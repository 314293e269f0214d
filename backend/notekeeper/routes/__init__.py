"""
NoteKeeper Backend: API Routes Package
=======================================

Route Inventory:
    - notes.py:   GET    /api/notes          (list notes)
                  GET    /api/notes/{id}     (get one note)
                  POST   /api/notes          (create note)
                  DELETE /api/notes/{id}     (delete note)
    - users.py:   POST   /api/users          (register)
                  GET    /api/users          (list users)
                  POST   /api/login          (issue token)
    - health.py:  GET    /health             (service health check)

Routes stay thin: pull the path id and raw body out of the request, call
a service, return its result. Status codes for errors come from the
exception handlers in main.py.
"""
