"""
repositories/provider_registry.py

Responsibility: Owns the ordered collection of ProviderRecords built from the
configuration and hands them to the update engine through cursors.
Does NOT: parse or validate configuration, or send HTTP requests.
"""

from __future__ import annotations

import logging
from typing import Iterator

from ddns.conf_parser import SectionOptions
from ddns.models import ProviderRecord
from services.provider_builder import ProviderBuilder

logger = logging.getLogger(__name__)


class RegistryCursor:
    """
    Walks a ProviderRegistry one record at a time.

    Each caller holds its own cursor, so independent walks never disturb
    one another. A cursor is not thread-safe.
    """

    def __init__(self, registry: "ProviderRegistry") -> None:
        self._registry = registry
        self._index: int | None = None

    def iterate(self, reset: bool) -> ProviderRecord | None:
        """
        Returns the first record (reset=True) or the next one (reset=False).

        Args:
            reset: Rewind to the first record before returning.

        Returns:
            The current record, or None at end of sequence. Advancing a
            cursor that was never reset also returns None.
        """
        if reset:
            self._index = 0
        elif self._index is None:
            return None
        else:
            self._index += 1

        records = self._registry.records
        if self._index >= len(records):
            self._index = len(records)
            return None
        return records[self._index]


class ProviderRegistry:
    """
    Ordered collection of ProviderRecords, in declaration order.

    The registry exclusively owns its records until destroy_all(); nothing
    else may release them.

    Collaborators:
        - ProviderBuilder: builds the record for each section passed to create()
    """

    def __init__(self, builder: ProviderBuilder | None = None) -> None:
        """
        Initialises an empty registry.

        Args:
            builder: Used by create(); may be omitted when records are only
                     inserted directly.
        """
        self._builder = builder
        self._records: list[ProviderRecord] = []
        self._cursor = RegistryCursor(self)

    # ---------------------------------------------------------------------------
    # Population
    # ---------------------------------------------------------------------------

    def create(self, section: SectionOptions) -> ProviderRecord:
        """
        Builds a record for the section and appends it.

        Args:
            section: A section that passed validation.

        Returns:
            The inserted ProviderRecord.

        Raises:
            SectionError: If the builder rejects the section; nothing is
                          inserted in that case.
        """
        if self._builder is None:
            raise RuntimeError("ProviderRegistry.create() needs a ProviderBuilder")

        record = self._builder.build(section)
        self.insert(record)
        logger.info("Added DDNS provider %s (%d hostnames).", section.label, len(record.hostnames))
        return record

    def insert(self, record: ProviderRecord) -> None:
        self._records.append(record)

    # ---------------------------------------------------------------------------
    # Iteration
    # ---------------------------------------------------------------------------

    @property
    def records(self) -> tuple[ProviderRecord, ...]:
        return tuple(self._records)

    def cursor(self) -> RegistryCursor:
        """Returns a new, independent cursor over this registry."""
        return RegistryCursor(self)

    def iterate(self, reset: bool) -> ProviderRecord | None:
        """
        Steps the registry's own cursor.

        Only one walk may use this entry point at a time; callers that need
        independent walks should use cursor() or plain iteration instead.

        Args:
            reset: Rewind to the first record before returning.

        Returns:
            The current record, or None at end of sequence.
        """
        return self._cursor.iterate(reset)

    def __iter__(self) -> Iterator[ProviderRecord]:
        return iter(self.records)

    def __len__(self) -> int:
        return len(self._records)

    # ---------------------------------------------------------------------------
    # Cleanup
    # ---------------------------------------------------------------------------

    def destroy_all(self) -> None:
        """
        Releases every record (HTTP handles and encoded password included)
        and empties the registry. Safe to call on an empty registry.

        Returns:
            None
        """
        for record in self._records:
            record.release()
        count = len(self._records)
        self._records.clear()
        self._cursor = RegistryCursor(self)
        if count:
            logger.debug("Released %d DDNS providers.", count)
