"""
Notes API — Services Layer
============================

Service Inventory:
    - DocumentStore (abstract): Interface for the remote tree store
    - FirebaseStore: Realtime Database implementation
    - NoteService: The five note operations on top of a DocumentStore
"""
