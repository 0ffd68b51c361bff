"""Security primitives: password hashing and policy, JWT, access-token claims."""
