"""
NoteKeeper Backend: Services Layer
===================================

Service Inventory:
    - validation:          pure payload checks for notes, users and login
    - identifier_service:  id generation and path id parsing
    - duplicate_guard:     exact-content duplicate check for notes
    - NoteService:         list / get / create / delete notes
    - UserService:         register / list users, login

Services raise exceptions from notekeeper.exceptions and never build HTTP
responses themselves.
"""
