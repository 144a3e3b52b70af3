"""core/ -- Kernel shared by every layer. Holds configuration only.

Layer rule: core/ imports only stdlib + third-party libraries.
"""
