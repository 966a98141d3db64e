"""
Use Cases

Organized into domain folders:
- auth/: Registration, login, password reset, email verification
- users/: Operations on the caller's own account
"""
