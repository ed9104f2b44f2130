"""Account records, credential hashing, and the registration/login service."""
