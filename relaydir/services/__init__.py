# Services package
from relaydir.services.dataset_service import DatasetService

__all__ = [
    "DatasetService",
]
