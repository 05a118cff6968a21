"""
Feature modules for the SprintDesk backend.

Each module is self-contained with its own:
- interfaces.py: Protocol definitions for the module's public API
- models.py: Pydantic models for records and API bodies
- repository.py: In-memory and Supabase storage
- service.py: Business logic implementation
- routes.py: FastAPI route handlers (where the module has an HTTP surface)
- exceptions.py: Module-specific exceptions

Modules communicate through interfaces, not concrete implementations.
"""
