from abc import ABC, abstractmethod

from token_chain.domain.registry import UserRegistry
from token_chain.schemas import RegistryMeta


class RegistryRepository(ABC):
    @abstractmethod
    def load(self) -> UserRegistry:
        pass

    @abstractmethod
    def serialize(self, registry: UserRegistry, meta: RegistryMeta) -> str:
        pass
