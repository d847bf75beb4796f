"""
longdiv_api - HTTP service around the long-division engine

Run with ``uvicorn longdiv_api.main:app``.
"""
