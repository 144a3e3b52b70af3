"""api/ -- HTTP layer for TaskTrack (FastAPI app, routes, transport models).

Layer rule: api/ may import from auth/, tasks/, docstore/ and core/.
Nothing outside api/ imports from it.
"""
