from token_chain.repositories.interfaces import RegistryRepository
from token_chain.repositories.registry_store import JsonRegistryStore

__all__ = [
    "JsonRegistryStore",
    "RegistryRepository",
]
