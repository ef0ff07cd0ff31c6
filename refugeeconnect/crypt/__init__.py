"""
The `crypt` package centralizes password handling.

Contents
--------
- encrypt_decrypt
    `EncryptionDec`:
        * `hash_password`: bcrypt hash (cost 12) of a plaintext password
        * `check_passwords`: verifies a plaintext password against a stored hash
"""
