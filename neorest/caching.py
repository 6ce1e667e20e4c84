#!/usr/bin/env python
# -*- encoding: utf-8 -*-

# Copyright 2011-2020, Nigel Small
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.


from threading import RLock


__all__ = ["EntityCache"]


class EntityCache(object):
    """ Map of server-assigned ID to the in-memory entity that
    represents it, so that repeated lookups of the same remote record
    return the same object.

    Nodes and relationships have separate ID spaces on the server, so
    entries are keyed by both the entity kind and the ID. There is no
    eviction; entries live as long as the cache. All access is
    serialised by a lock.
    """

    def __init__(self):
        self.__entities = {}
        self.__lock = RLock()

    def __len__(self):
        with self.__lock:
            return len(self.__entities)

    def __contains__(self, entity):
        key = self._key(entity)
        if key is None:
            return False
        with self.__lock:
            return self.__entities.get(key) is entity

    @staticmethod
    def _key(entity):
        if entity.id is None:
            return None
        return entity.kind, entity.id

    def set_cached_entity(self, entity):
        """ Store `entity` under its ID. Entities without an ID are
        ignored.
        """
        key = self._key(entity)
        if key is None:
            return
        with self.__lock:
            self.__entities[key] = entity

    def setdefault(self, entity):
        """ Store `entity` unless another instance is already cached
        for the same ID, and return whichever instance ends up cached.
        """
        key = self._key(entity)
        if key is None:
            return entity
        with self.__lock:
            return self.__entities.setdefault(key, entity)

    def get_cached_entity(self, id_, kind):
        """ Return the cached entity of `kind` (``'node'`` or
        ``'relationship'``) with the given ID, or :const:`None`.
        """
        with self.__lock:
            return self.__entities.get((kind, int(id_)))

    def delete_cached_entity(self, entity):
        key = self._key(entity)
        if key is None:
            return
        with self.__lock:
            if self.__entities.get(key) is entity:
                del self.__entities[key]

    def clear(self):
        with self.__lock:
            self.__entities.clear()
