"""Train catalog package"""
from app.services.catalog.trains import TRAINS, TrainCatalog

__all__ = [
    'TRAINS',
    'TrainCatalog',
]
