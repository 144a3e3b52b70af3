"""tasks/ -- Task domain model and owner-scoped repository for TaskTrack.

Layer rule: tasks/ imports stdlib, third-party libraries and docstore/.
It does NOT import from api/, auth/, or core/.
"""
