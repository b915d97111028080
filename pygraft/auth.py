"""Identity of the caller, computed from a bearer credential."""
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from jwt.exceptions import InvalidTokenError

from pygraft.context import Identity


class IdentityResolver(ABC):

    @abstractmethod
    def resolve(self, authorization: Optional[str]) -> Identity:
        pass


class AnonymousIdentityResolver(IdentityResolver):

    def resolve(self, authorization):
        return Identity.anonymous()


class JWTIdentityResolver(IdentityResolver):
    """Issue and verify self-signed `Authorization: Bearer <jwt>` tokens."""

    def __init__(self, secret_key, algorithm='HS256', expiry_hours=1):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expiry_hours = expiry_hours

    @classmethod
    def from_settings(cls, settings):
        return cls(
            settings.SECRET_KEY,
            algorithm=settings.TOKEN_ALGORITHM,
            expiry_hours=settings.TOKEN_EXPIRY_HOURS,
        )

    def issue(self, subject_id, **claims) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            'iat': now,
            'exp': now + timedelta(hours=self.expiry_hours),
            **claims,
            'sub': str(subject_id),
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def resolve(self, authorization):
        if not authorization:
            return Identity.anonymous()
        scheme, _, token = authorization.partition(' ')
        if scheme.lower() != 'bearer' or not token.strip():
            return Identity.anonymous()
        try:
            payload = jwt.decode(
                token.strip(), self.secret_key, algorithms=[self.algorithm]
            )
        except InvalidTokenError as e:
            logging.info('Bearer token rejected: %s', e)
            return Identity.anonymous()
        subject = payload.get('sub')
        if not subject:
            return Identity.anonymous()
        return Identity.of(subject)
