"""
Todo backend API package.

Two independent FastAPI services share this package:
- identity service (signup/login): main.identity_app
- task service (admin login + task CRUD): main.tasks_app

Modules:
- config: environment settings + logging setup
- db: PostgreSQL connection pooling + query helpers
- errors: error taxonomy and JSON error handlers
- auth_utils: password hashing, admin check and JWT helpers
- schemas: Pydantic models for the REST API
- users / task_store: repositories over the users and tasks tables
"""
