"""Authentication and authorization.

Users authenticate with email/password and receive a JWT access token.
The token travels as `Authorization: Bearer <token>` or in the authToken
cookie and resolves to an Identity {id, email} for ownership checks.
"""
