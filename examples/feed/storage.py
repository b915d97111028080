"""
Storage and asset collaborators of the feed resolvers.

Only in-memory implementations live here; a database backed collection
implements the same `Collection` interface.
"""
import copy
import itertools
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple


class Collection(ABC):

    @abstractmethod
    async def find_by_id(self, id) -> Optional[Dict[str, Any]]:
        pass

    @abstractmethod
    async def find_one(self, criteria: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        pass

    @abstractmethod
    async def find_matching(
        self,
        criteria: Optional[Mapping[str, Any]] = None,
        sort: Sequence[Tuple[str, bool]] = (),
        skip: int = 0,
        limit: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        """
        Entities equal to `criteria` on every given key, ordered by the
        `(key, descending)` pairs of `sort`
        """

    @abstractmethod
    async def count(self, criteria: Optional[Mapping[str, Any]] = None) -> int:
        pass

    @abstractmethod
    async def create(self, entity: Mapping[str, Any]) -> Dict[str, Any]:
        pass

    @abstractmethod
    async def update(self, id, patch: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        pass

    @abstractmethod
    async def delete(self, id) -> bool:
        pass


class MemoryCollection(Collection):

    def __init__(self):
        self._entities: Dict[str, Dict[str, Any]] = {}
        self._order: Dict[str, int] = {}
        self._sequence = itertools.count()

    async def find_by_id(self, id):
        entity = self._entities.get(str(id))
        return copy.deepcopy(entity) if entity is not None else None

    async def find_one(self, criteria):
        for entity in self._entities.values():
            if self._matches(entity, criteria):
                return copy.deepcopy(entity)
        return None

    async def find_matching(self, criteria=None, sort=(), skip=0, limit=None):
        entities = [
            e for e in self._entities.values() if self._matches(e, criteria)
        ]
        for key, descending in reversed(list(sort)):
            entities.sort(
                key=lambda e: (e[key], self._order[e['id']]),
                reverse=descending
            )
        end = None if limit is None else skip + limit
        return [copy.deepcopy(e) for e in entities[skip:end]]

    async def count(self, criteria=None):
        return sum(
            1 for e in self._entities.values() if self._matches(e, criteria)
        )

    async def create(self, entity):
        now = datetime.now(timezone.utc)
        entity = {
            **copy.deepcopy(dict(entity)),
            'id': uuid.uuid4().hex,
            'created_at': now,
            'updated_at': now,
        }
        self._entities[entity['id']] = entity
        self._order[entity['id']] = next(self._sequence)
        return copy.deepcopy(entity)

    async def update(self, id, patch):
        entity = self._entities.get(str(id))
        if entity is None:
            return None
        entity.update(copy.deepcopy(dict(patch)))
        entity['updated_at'] = datetime.now(timezone.utc)
        return copy.deepcopy(entity)

    async def delete(self, id):
        self._order.pop(str(id), None)
        return self._entities.pop(str(id), None) is not None

    @staticmethod
    def _matches(entity, criteria):
        return all(entity.get(k) == v for k, v in (criteria or {}).items())


class MemoryStore:

    def __init__(self):
        self.users = MemoryCollection()
        self.posts = MemoryCollection()


class AssetStore(ABC):
    """
    Binary assets (post images) are uploaded outside of the query
    endpoint; operations only carry their reference string
    """

    @abstractmethod
    async def clear(self, reference: str):
        pass


class MemoryAssetStore(AssetStore):

    def __init__(self):
        self.references = set()
        self.cleared = []

    def put(self, reference):
        self.references.add(reference)
        return reference

    async def clear(self, reference):
        self.references.discard(reference)
        self.cleared.append(reference)
