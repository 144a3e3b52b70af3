"""auth/ -- Authentication package for TaskTrack.

Layer rule: auth/ imports stdlib, third-party libraries, core/ and docstore/.
It does NOT import from api/ or tasks/.
api/ imports from auth/, not the other way around.
"""
