"""Authentication and authorization.

One authentication path: email/password → signed session token in an
HttpOnly cookie. Every protected request resolves the cookie back to a
CurrentUser, which scopes all task queries to that user's rows.
"""
