from .memory import MemoryResolver
from .types import Resolver

__all__ = ['MemoryResolver', 'Resolver']
