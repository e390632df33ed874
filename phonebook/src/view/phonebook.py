"""
Phonebook view model.

Holds the locally cached persons, the filter text and the add-form
inputs, and turns user actions into requests against the persons
resource. Requests are not ordered or de-duplicated: whichever response
resolves last decides the local state.
"""

from typing import Awaitable, Callable, List, Optional

from shared.logging import get_logger

from phonebook.src.services.persons_client import (
    Person, PersonsApiError, PersonsClient, StaleEntryError
)
from phonebook.src.view.notification import Notifier

logger = get_logger(__name__)


class PhonebookView:
    """Contact list state and the actions that mutate it."""

    def __init__(
        self,
        client: PersonsClient,
        notifier: Notifier,
        confirm: Callable[[str], Awaitable[bool]]
    ):
        """
        Initialize the view.

        Args:
            client: Persons API client
            notifier: Banner shown after mutations
            confirm: Coroutine function asking the user a yes/no question
        """
        self.client = client
        self.notifier = notifier
        self.confirm = confirm

        self.persons: List[Person] = []
        self.filter_text = ""
        self.new_name = ""
        self.new_number = ""

    async def load(self) -> List[Person]:
        """Replace the local cache with the server's persons."""
        try:
            self.persons = await self.client.get_all()
        except PersonsApiError as e:
            self.notifier.error(e.message)
        return self.persons

    def set_filter(self, text: str) -> None:
        self.filter_text = text

    def visible_persons(self) -> List[Person]:
        """Persons whose name contains the filter text, ignoring case."""
        query = self.filter_text.lower()
        return [person for person in self.persons if query in person.name.lower()]

    def find_by_name(self, name: str) -> Optional[Person]:
        return next((person for person in self.persons if person.name == name), None)

    async def submit(self) -> Optional[Person]:
        """
        Add the person in the form, or replace the number of an existing one.

        A name already in the local cache asks for confirmation; declining
        leaves everything unchanged. The inputs are cleared in every case.

        Returns:
            The created or updated person, None if nothing was stored
        """
        name, number = self.new_name, self.new_number

        try:
            existing = self.find_by_name(name)

            if existing is None:
                return await self._create(name, number)

            question = f"{name} is already added to phonebook, replace the old number with a new one?"
            if not await self.confirm(question):
                logger.debug("person_replace_declined", name=name)
                return None

            return await self._replace_number(existing, number)

        finally:
            self.new_name = ""
            self.new_number = ""

    async def _create(self, name: str, number: str) -> Optional[Person]:
        try:
            person = await self.client.create(name, number)
        except PersonsApiError as e:
            self.notifier.error(e.message)
            return None

        self.persons = self.persons + [person]
        self.notifier.show(f"Added {person.name}")
        return person

    async def _replace_number(self, existing: Person, number: str) -> Optional[Person]:
        try:
            updated = await self.client.update(existing.id, existing.name, number)
        except StaleEntryError:
            self._forget(existing)
            return None
        except PersonsApiError as e:
            self.notifier.error(e.message)
            return None

        self.persons = [updated if person.id == existing.id else person for person in self.persons]
        self.notifier.show(f"Changed number of {updated.name}")
        return updated

    async def delete(self, person_id: str) -> bool:
        """
        Delete a person after confirmation.

        Returns:
            True if the person is gone from the local list
        """
        person = next((p for p in self.persons if p.id == person_id), None)
        if person is None:
            return False

        if not await self.confirm(f"Delete {person.name}?"):
            return False

        try:
            await self.client.remove(person.id)
        except StaleEntryError:
            self._forget(person)
            return True
        except PersonsApiError as e:
            self.notifier.error(e.message)
            return False

        self.persons = [p for p in self.persons if p.id != person.id]
        self.notifier.show(f"Deleted {person.name}")
        return True

    def _forget(self, person: Person) -> None:
        """Drop an entry the server no longer has."""
        logger.info("stale_person_removed", person_id=person.id, name=person.name)
        self.persons = [p for p in self.persons if p.id != person.id]
        self.notifier.error(f"Information of {person.name} has already been removed from server")
