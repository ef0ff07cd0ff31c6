import bcrypt


class EncryptionDec:
    """
    Password hashing helpers backed by bcrypt.

    Methods
    -------
    hash_password(text: str) -> str
        Hashes a plaintext password with a freshly generated salt.
    check_passwords(plain_text: str, passwd: str) -> bool
        Verifies a plaintext password against a stored hash.
    """

    def hash_password(self, text: str) -> str:
        """
        Hash a plaintext password using bcrypt.

        Parameters
        ----------
        text : str
            The plaintext password.

        Returns
        -------
        str
            The bcrypt hash (UTF-8 decoded) ready to be stored.
        """
        salt = bcrypt.gensalt(rounds=12)
        return bcrypt.hashpw(text.encode("utf-8"), salt).decode("utf-8")

    def check_passwords(self, plain_text: str, passwd: str) -> bool:
        """
        Return True when `plain_text` matches the stored hash `passwd`.

        A malformed stored hash counts as a mismatch.
        """
        try:
            return bcrypt.checkpw(plain_text.encode("utf-8"), passwd.encode("utf-8"))
        except ValueError:
            return False
