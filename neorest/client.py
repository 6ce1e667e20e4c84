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


from neorest.caching import EntityCache
from neorest.commands import GetServerInfo, \
    CreateNode, UpdateNode, LoadNode, DeleteNode, \
    CreateRelationship, UpdateRelationship, LoadRelationship, DeleteRelationship
from neorest.config import ConnectionProfile
from neorest.data import Node, Relationship


__all__ = ["Client"]


class Client(object):
    """ Session against a Neo4j REST endpoint. The client owns the
    transport and the entity cache, and runs one command per entity
    operation::

        >>> from neorest import Client
        >>> client = Client("http://localhost:7474/db/data")
        >>> alice = client.make_node({"name": "Alice"}).save()
        >>> client.get_node(alice.id) is alice
        True

    :param profile: a :class:`.ConnectionProfile`, URI string or
        dictionary of connection settings (ignored if a `transport`
        is supplied)
    :param transport: an object providing ``request(method, path,
        body)`` and an ``endpoint`` attribute, used instead of an
        :class:`.HTTPTransport`
    :param settings: individual connection settings, see
        :class:`.ConnectionProfile`
    """

    def __init__(self, profile=None, transport=None, **settings):
        if transport is None:
            from neorest.http import HTTPTransport
            transport = HTTPTransport(ConnectionProfile(profile, **settings))
        self.transport = transport
        self.cache = EntityCache()
        self.__server_info = None

    def __repr__(self):
        return "<%s endpoint=%r>" % (self.__class__.__name__, self.endpoint)

    @property
    def endpoint(self):
        return self.transport.endpoint

    def close(self):
        try:
            close = self.transport.close
        except AttributeError:
            pass
        else:
            close()

    def run_command(self, command):
        """ Execute a single command and return its result.
        """
        return command.execute()

    def server_info(self, refresh=False):
        """ Return the metadata document served at the database root.
        The document is fetched once and then reused unless `refresh`
        is requested.
        """
        if self.__server_info is None or refresh:
            self.__server_info = self.run_command(GetServerInfo(self))
        return self.__server_info

    @property
    def neo4j_version(self):
        """ Version of the remote Neo4j server.
        """
        from packaging.version import Version
        return Version(self.server_info()["neo4j_version"])

    @property
    def supports_index_uniqueness_modes(self):
        """ Indicates whether the server supports the `get_or_create`
        and `create_or_fail` uniqueness modes on index endpoints.
        """
        from packaging.version import Version
        return self.neo4j_version >= Version("1.9")

    def make_node(self, properties=None):
        """ Return a new, unsaved node attached to this client.
        """
        return Node(properties, client=self)

    def make_relationship(self, properties=None):
        """ Return a new, unsaved relationship attached to this client.
        """
        return Relationship(properties=properties, client=self)

    def get_node(self, id_, force=False):
        """ Return the node with the given ID.

        The cached instance is returned if there is one; otherwise an
        unloaded node is created and cached, to be loaded lazily on
        first read. If `force` is true, the node is loaded right away.

        :raise NotFoundError: if `force` is true and no such node exists
        """
        node = self.cache.get_cached_entity(id_, Node.kind)
        if node is None:
            node = Node.hydrate(self, {"self": "%s/node/%d" % (self.endpoint, int(id_))})
        if force:
            self.load_node(node)
        return node

    def get_relationship(self, id_, force=False):
        """ Return the relationship with the given ID.

        The cached instance is returned if there is one; otherwise an
        unloaded relationship is created and cached, to be loaded
        lazily on first read. If `force` is true, the relationship is
        loaded right away.

        :raise NotFoundError: if `force` is true and no such
            relationship exists
        """
        rel = self.cache.get_cached_entity(id_, Relationship.kind)
        if rel is None:
            rel = Relationship.hydrate(self, {"self": "%s/relationship/%d" % (self.endpoint, int(id_))})
        if force:
            self.load_relationship(rel)
        return rel

    def hydrate(self, data):
        """ Convert a REST representation of a node or relationship
        into the corresponding entity.
        """
        if "type" in data and "start" in data and "end" in data:
            return self.hydrate_relationship(data)
        else:
            return self.hydrate_node(data)

    def hydrate_node(self, data, inst=None):
        """ Build a node from its REST representation, or refresh
        `inst` from it. A cached node with the same ID is reused.
        """
        return Node.hydrate(self, data, inst)

    def hydrate_relationship(self, data, inst=None):
        """ Build a relationship from its REST representation, or
        refresh `inst` from it. The start and end nodes become unloaded
        nodes unless they are already cached.
        """
        return Relationship.hydrate(self, data, inst)
    def save_node(self, node):
        if node.has_id():
            command = UpdateNode(self, node)
        else:
            command = CreateNode(self, node)
        return self.run_command(command)

    def load_node(self, node):
        return self.run_command(LoadNode(self, node))

    def delete_node(self, node):
        return self.run_command(DeleteNode(self, node))

    def save_relationship(self, rel):
        if rel.has_id():
            command = UpdateRelationship(self, rel)
        else:
            command = CreateRelationship(self, rel)
        return self.run_command(command)

    def load_relationship(self, rel):
        return self.run_command(LoadRelationship(self, rel))

    def delete_relationship(self, rel):
        return self.run_command(DeleteRelationship(self, rel))

    def save(self, entity):
        """ Save any entity, dispatching on its kind.
        """
        kind = getattr(entity, "kind", None)
        if kind == Node.kind:
            return self.save_node(entity)
        elif kind == Relationship.kind:
            return self.save_relationship(entity)
        else:
            raise TypeError("Cannot save object of type %s" % type(entity).__name__)

    def load(self, entity):
        kind = getattr(entity, "kind", None)
        if kind == Node.kind:
            return self.load_node(entity)
        elif kind == Relationship.kind:
            return self.load_relationship(entity)
        else:
            raise TypeError("Cannot load object of type %s" % type(entity).__name__)

    def delete(self, entity):
        kind = getattr(entity, "kind", None)
        if kind == Node.kind:
            return self.delete_node(entity)
        elif kind == Relationship.kind:
            return self.delete_relationship(entity)
        else:
            raise TypeError("Cannot delete object of type %s" % type(entity).__name__)
