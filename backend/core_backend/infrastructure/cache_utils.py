from django.core.cache import cache
from functools import wraps
import hashlib
import time
import logging

logger = logging.getLogger(__name__)

KEY_REGISTRY_PREFIX = "cache_keys"


def _registry_key(name):
    return f"{KEY_REGISTRY_PREFIX}:{name}"


def _remember_key(name, cache_key, timeout):
    registry = cache.get(_registry_key(name)) or set()
    registry.add(cache_key)
    cache.set(_registry_key(name), registry, timeout)


def simple_cache(timeout=300, key_prefix="", log_performance=True):
    """Cache a function's return value keyed on its name and arguments."""

    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            start_time = time.time()
            cache_key = ":".join(
                [
                    "simple_cache",
                    key_prefix,
                    func.__name__,
                    hashlib.md5(str(args).encode()).hexdigest()[:8],
                    hashlib.md5(str(sorted(kwargs.items())).encode()).hexdigest()[:8],
                ]
            )

            result = cache.get(cache_key)
            hit = result is not None
            if not hit:
                result = func(*args, **kwargs)
                cache.set(cache_key, result, timeout)
                _remember_key(func.__name__, cache_key, timeout)

            if log_performance:
                execution_time = (time.time() - start_time) * 1000
                logger.debug(
                    f"Cache {'HIT' if hit else 'MISS'} for {func.__name__} "
                    f"({execution_time:.2f}ms)"
                )
            return result

        return wrapper

    return decorator


def invalidate_cache_pattern(pattern):
    """Drop every cached result of the function named `pattern`."""
    registry = cache.get(_registry_key(pattern)) or set()
    if registry:
        cache.delete_many(list(registry))
    cache.delete(_registry_key(pattern))
    logger.info(f"Invalidated {len(registry)} cached entries for '{pattern}'")
    return len(registry)


def cache_static_data(timeout=3600 * 6):
    """Decorator for highly static data (6 hours default)"""
    return simple_cache(timeout=timeout, key_prefix="static")
