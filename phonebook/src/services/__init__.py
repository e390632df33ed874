from .persons_client import Person, PersonsApiError, PersonsClient, StaleEntryError

__all__ = ["Person", "PersonsApiError", "PersonsClient", "StaleEntryError"]
