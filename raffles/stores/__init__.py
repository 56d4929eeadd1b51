from raffles.stores.interfaces import PersistenceError, PersistenceTimeout, RaffleStore
from raffles.stores.memory_store import InMemoryRaffleStore

__all__ = ["PersistenceError", "PersistenceTimeout", "RaffleStore", "InMemoryRaffleStore"]
