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

"""
Local representations of remote graph entities.

Both :class:`.Node` and :class:`.Relationship` start life without an
ID. The ID is bound exactly once, when the server reports that the
entity has been created (or when the entity is hydrated from server
data), and is only cleared again by a successful delete.

Entities attached to a :class:`neorest.Client` are loaded lazily: the
first read of a field that has not yet been fetched issues a
synchronous GET request through that client. Every accessor that can
do this says so in its documentation.
"""


from neorest.errors import BindError
from neorest.util import id_from_uri


__all__ = ["PropertyContainer", "Node", "Relationship"]


class PropertyContainer(object):
    """ Base class for entities that carry a set of properties and
    may be bound to a server-assigned ID.

    As with Neo4j itself, a property set to :const:`None` is
    equivalent to a missing property.
    """

    #: Kind of remote entity, as used in REST paths and as the
    #: namespace for IDs in the entity cache.
    kind = None

    def __init__(self, properties=None, client=None):
        self.__id = None
        self.__properties = {}
        self._client = None
        self._lazy_load = True
        self._loaded = False
        if properties:
            for key, value in dict(properties).items():
                if value is not None:
                    self.__properties[key] = value
        if client is not None:
            self.client = client

    def __repr__(self):
        s = [self.__class__.__name__]
        if self.__id is not None:
            s.append("id=%r" % self.__id)
        s.extend(self._repr_fields())
        if self.__id is not None and not self._loaded and self._lazy_load:
            s.append("properties=?")
        else:
            s.append("properties=%r" % self.__properties)
        return "<" + " ".join(s) + ">"

    def _repr_fields(self):
        return []

    def __eq__(self, other):
        if self is other:
            return True
        if not isinstance(other, PropertyContainer) or self.kind != other.kind:
            return False
        return self.__id is not None and self.__id == other.id

    def __ne__(self, other):
        return not self.__eq__(other)

    def __hash__(self):
        if self.__id is None:
            return hash(id(self))
        else:
            return hash((self.kind, self.__id))

    def __getitem__(self, key):
        return self.get_property(key)

    def __setitem__(self, key, value):
        self.set_property(key, value)

    def __delitem__(self, key):
        self.remove_property(key)

    def __contains__(self, key):
        self.load_properties()
        return key in self.__properties

    @property
    def id(self):
        """ The server-assigned ID of this entity, or :const:`None` if
        it has not been created.
        """
        return self.__id

    def has_id(self):
        return self.__id is not None

    def bind(self, id_):
        """ Bind this entity to the remote record with the given ID.

        :raise BindError: if this entity is already bound
        """
        if self.__id is not None:
            raise BindError("%s is already bound to ID %s" % (self.__class__.__name__, self.__id))
        self.__id = int(id_)

    def unbind(self):
        """ Detach this entity from its remote record. Called once the
        record has been deleted.
        """
        self.__id = None
        self._loaded = False

    @property
    def client(self):
        """ The :class:`neorest.Client` through which this entity
        reaches the server.
        """
        return self._client

    @client.setter
    def client(self, client):
        self._client = client

    def _require_client(self):
        if self._client is None:
            raise BindError("%s has no client" % self.__class__.__name__)
        return self._client

    @property
    def lazy_load(self):
        return self._lazy_load

    def use_lazy_load(self, flag):
        """ Switch lazy loading on or off for this entity.
        """
        self._lazy_load = bool(flag)

    @property
    def loaded(self):
        """ :const:`True` once the fields of this entity have been
        fetched from, or confirmed against, the server.
        """
        return self._loaded

    def load_properties(self):
        """ Lazy-load hook. If lazy loading is enabled and this entity
        is bound but has not been loaded, fetch it now.

        This blocks on a network round trip when it loads.
        """
        if self._lazy_load and not self._loaded and self.__id is not None and self._client is not None:
            self.load()

    def _hydrate_properties(self, properties):
        self.__properties = {key: value for key, value in properties.items() if value is not None}
        self._loaded = True

    def get_property(self, key):
        """ Return the value of a property, or :const:`None` if it is
        not set. May trigger a lazy load.
        """
        self.load_properties()
        return self.__properties.get(key)

    def set_property(self, key, value):
        """ Set the value of a property; :const:`None` removes it.
        May trigger a lazy load, so that a later load does not discard
        the change.
        """
        self.load_properties()
        if value is None:
            self.__properties.pop(key, None)
        else:
            self.__properties[key] = value

    def remove_property(self, key):
        self.load_properties()
        self.__properties.pop(key, None)

    @property
    def properties(self):
        """ A copy of all properties. May trigger a lazy load.
        """
        self.load_properties()
        return dict(self.__properties)

    def set_properties(self, properties):
        """ Replace all properties with those in `properties`.
        """
        self.load_properties()
        self.__properties = {key: value for key, value in dict(properties).items()
                             if value is not None}

    def save(self):
        raise NotImplementedError("Method save must be overridden")

    def load(self):
        raise NotImplementedError("Method load must be overridden")

    def delete(self):
        raise NotImplementedError("Method delete must be overridden")


class Node(PropertyContainer):
    """ A graph node, optionally bound to a remote counterpart::

        >>> alice = client.make_node({"name": "Alice"})
        >>> alice.save()
        >>> alice.id
        12

    """

    kind = "node"

    @classmethod
    def hydrate(cls, client, data, inst=None):
        """ Produce a :class:`.Node` from the REST representation in
        `data`, reusing a cached instance where one exists. If `data`
        carries no ``data`` member, the node is left unloaded.
        """
        node_id = id_from_uri(data["self"])
        if inst is None:
            inst = client.cache.get_cached_entity(node_id, cls.kind)
            if inst is None:
                new_inst = cls(client=client)
                new_inst.bind(node_id)
                inst = client.cache.setdefault(new_inst)
        elif inst.id is None:
            inst.bind(node_id)
            client.cache.set_cached_entity(inst)
        elif inst.id != node_id:
            raise BindError("Cannot hydrate node %s with data for node %s" % (inst.id, node_id))
        if inst.client is None:
            inst.client = client
        if "data" in data:
            inst._hydrate_properties(data["data"] or {})
        return inst

    def save(self):
        """ Create this node on the server, or update its properties
        if it already exists. Lazy loading is switched off afterwards.
        """
        self._require_client().save_node(self)
        self.use_lazy_load(False)
        return self

    def load(self):
        """ Fetch this node from the server.
        """
        self._require_client().load_node(self)
        return self

    def delete(self):
        """ Delete this node on the server and unbind it.
        """
        self._require_client().delete_node(self)
        return self


class Relationship(PropertyContainer):
    """ A typed, directed relationship between two nodes::

        >>> knows = client.make_relationship({"since": 1999})
        >>> knows.start_node = alice
        >>> knows.end_node = bob
        >>> knows.type = "KNOWS"
        >>> knows.save()

    The start and end nodes are shared references: a relationship
    never deletes or unbinds them.

    A relationship becomes *unique* once a unique key is set. It is
    then created through the legacy relationship index named after
    its type, using the :attr:`.unique_action` policy to decide what
    happens when a matching relationship already exists.
    """

    kind = "relationship"

    #: Return the existing relationship if one matches.
    GET_OR_CREATE = "get_or_create"

    #: Fail if a matching relationship exists.
    CREATE_OR_FAIL = "create_or_fail"

    unique_actions = (GET_OR_CREATE, CREATE_OR_FAIL)

    @classmethod
    def hydrate(cls, client, data, inst=None):
        """ Produce a :class:`.Relationship` from the REST
        representation in `data`, reusing a cached instance where one
        exists. Start and end nodes become (possibly unloaded) cached
        :class:`.Node` instances.
        """
        rel_id = id_from_uri(data["self"])
        if inst is None:
            inst = client.cache.get_cached_entity(rel_id, cls.kind)
            if inst is None:
                new_inst = cls(client=client)
                new_inst.bind(rel_id)
                inst = client.cache.setdefault(new_inst)
        elif inst.id is None:
            inst.bind(rel_id)
            client.cache.set_cached_entity(inst)
        elif inst.id != rel_id:
            raise BindError("Cannot hydrate relationship %s with data for "
                            "relationship %s" % (inst.id, rel_id))
        if inst.client is None:
            inst.client = client
        if "start" in data:
            inst._start = Node.hydrate(client, {"self": data["start"]})
        if "end" in data:
            inst._end = Node.hydrate(client, {"self": data["end"]})
        if "type" in data:
            inst._type = data["type"]
        if "data" in data:
            inst._hydrate_properties(data["data"] or {})
        return inst

    def __init__(self, start_node=None, type=None, end_node=None, properties=None, client=None):
        self._start = start_node
        self._end = end_node
        self._type = type
        self._unique = False
        self._unique_action = self.GET_OR_CREATE
        super(Relationship, self).__init__(properties, client)

    def _repr_fields(self):
        fields = []
        if self._start is not None:
            fields.append("start=%r" % self._start.id)
        if self._end is not None:
            fields.append("end=%r" % self._end.id)
        fields.append("type=%r" % self._type)
        return fields

    @property
    def client(self):
        """ The :class:`neorest.Client` through which this relationship
        reaches the server. Setting it also attaches the start and end
        nodes to the same client, but only where those nodes do not
        already have one.
        """
        return self._client

    @client.setter
    def client(self, client):
        self._client = client
        self._adopt(self._start)
        self._adopt(self._end)

    def _adopt(self, node):
        if node is not None and self._client is not None and node.client is None:
            node.client = self._client

    @property
    def start_node(self):
        """ The start node. Reading this on a bound relationship whose
        start node is not yet known triggers a lazy load.
        """
        if self._start is None:
            self.load_properties()
        return self._start

    @start_node.setter
    def start_node(self, node):
        self._start = node
        self._adopt(node)

    @property
    def end_node(self):
        """ The end node. Reading this on a bound relationship whose
        end node is not yet known triggers a lazy load.
        """
        if self._end is None:
            self.load_properties()
        return self._end

    @end_node.setter
    def end_node(self, node):
        self._end = node
        self._adopt(node)

    @property
    def type(self):
        """ The relationship type. Reading this triggers a lazy load
        if the relationship is bound and not yet loaded.
        """
        self.load_properties()
        return self._type

    @type.setter
    def type(self, value):
        self._type = value

    def _unique_record(self):
        if not isinstance(self._unique, dict):
            self._unique = {"key": None, "value": None}
        return self._unique

    @property
    def unique_key(self):
        """ Key under which this relationship is indexed for
        uniqueness, or :const:`None`.
        """
        if not isinstance(self._unique, dict):
            return None
        return self._unique["key"]

    @unique_key.setter
    def unique_key(self, key):
        self._unique_record()["key"] = key

    @property
    def unique_value(self):
        """ Value under which this relationship is indexed for
        uniqueness, or :const:`None`.
        """
        if not isinstance(self._unique, dict):
            return None
        return self._unique["value"]

    @unique_value.setter
    def unique_value(self, value):
        self._unique_record()["value"] = value

    def is_unique(self):
        """ :const:`True` if this relationship will be created through
        the uniqueness index. Only the presence of a key counts; a
        value on its own does not make a relationship unique.
        """
        return isinstance(self._unique, dict) and self._unique["key"] is not None

    def reset_uniqueness(self):
        """ Forget any unique key and value. The uniqueness action is
        left as it is.
        """
        self._unique = False
        return self

    @property
    def unique_action(self):
        """ Either :attr:`.GET_OR_CREATE` (the default) or
        :attr:`.CREATE_OR_FAIL`.
        """
        return self._unique_action

    def set_unique_action(self, action):
        """ Set the uniqueness action.

        :return: :const:`True` if `action` was accepted, :const:`False`
            if it was not recognised (in which case the current action
            is kept)
        """
        if action in self.unique_actions:
            self._unique_action = action
            return True
        return False

    def save(self):
        """ Create this relationship on the server, or update its
        properties if it already exists. Lazy loading is switched off
        afterwards.
        """
        self._require_client().save_relationship(self)
        self.use_lazy_load(False)
        return self

    def load(self):
        """ Fetch this relationship from the server.
        """
        self._require_client().load_relationship(self)
        return self

    def delete(self):
        """ Delete this relationship on the server and unbind it. The
        start and end nodes are not affected.
        """
        self._require_client().delete_relationship(self)
        return self
