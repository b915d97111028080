from abc import ABC, abstractmethod
from passlib.context import CryptContext


class PasswordHasher(ABC):

    @abstractmethod
    def hash(self, password: str) -> str:
        pass

    @abstractmethod
    def verify(self, password: str, hashed: str) -> bool:
        pass


class CryptContextHasher(PasswordHasher):
    """
    Password hashing with passlib, argon2 by default

    Extra keyword arguments are passlib context settings, e.g.
    `argon2__rounds=1` for cheap hashes in tests.
    """

    def __init__(self, schemes=('argon2',), **settings):
        self.context = CryptContext(
            schemes=list(schemes), deprecated='auto', **settings
        )

    def hash(self, password):
        return self.context.hash(password)

    def verify(self, password, hashed):
        try:
            return self.context.verify(password, hashed)
        except (ValueError, TypeError):
            # unrecognized or malformed hash
            return False
