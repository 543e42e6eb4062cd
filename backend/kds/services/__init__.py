from .queue_service import KitchenQueueProjector

__all__ = ['KitchenQueueProjector']
