"""API layer - FastAPI endpoints"""
