"""docstore/ -- Document store gateway for TaskTrack.

Schemaless JSON documents grouped into named collections, addressed by opaque
string ids, queried by field equality and ordering.

Layer rule: docstore/ imports only stdlib + third-party libraries.
It does NOT import from api/, auth/, tasks/, or core/.
auth/ and tasks/ import from docstore/, not the other way around.
"""
