import random
from abc import ABC, abstractmethod


class IdentityProvider(ABC):
    @abstractmethod
    def student_id(self, student_name: str) -> str:
        raise NotImplementedError


class AnonymousIdentityProvider(IdentityProvider):
    """Segnaposto finché non c'è autenticazione: id pseudo-casuale, il nome è ignorato."""

    prefix = "anonymous-user-"

    def student_id(self, student_name: str) -> str:
        return f"{self.prefix}{random.randint(0, 999)}"
