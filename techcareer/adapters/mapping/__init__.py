"""Object mapper adapters.

Implementations of MapperPort:
- ProfileMapper (registered per-type-pair conversion profiles)
"""
