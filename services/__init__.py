"""
services/ - Business Layer
==========================
Connection handling, list-view dispatch, ordering and exports.
"""
