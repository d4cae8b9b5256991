"""Authentication and authorization.

Learn: Three pieces, each usable on its own:
1. Credentials → bcrypt password hashes (password.py)
2. Token service → stateless JWT issue/verify (jwt.py)
3. Auth gate + ownership policy → per-request identity and
   "only the owner may change this" checks (dependencies.py, ownership.py)
"""
