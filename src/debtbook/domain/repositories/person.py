"""Person repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.person import Person


class PersonRepository(Protocol):
    """Repository for managing people.

    Implementations must assign unique ids and delete a person's
    transactions together with the person.
    """

    def get_by_id(self, person_id: int) -> Optional[Person]:
        """Retrieve a person by ID."""
        ...

    def list_all(self) -> list[Person]:
        """List every person ordered by ID."""
        ...

    def exists(self, person_id: int) -> bool:
        """Return True when a person with this ID is stored."""
        ...

    def create(self, person: Person) -> Person:
        """Persist a new person and return it with its ID assigned."""
        ...

    def update(self, person: Person) -> Person:
        """Persist changes to an existing person."""
        ...

    def delete(self, person_id: int) -> bool:
        """Delete a person and their transactions; False when the ID is unknown."""
        ...
