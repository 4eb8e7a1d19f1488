"""
FastAPI routers for the contact import service.
"""
