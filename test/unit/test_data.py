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


from pytest import raises

from neorest import Node, Relationship
from neorest.errors import BindError


def test_new_node_has_no_id():
    node = Node()
    assert node.id is None
    assert not node.has_id()


def test_node_properties():
    node = Node({"name": "Alice", "age": 33})
    assert node.get_property("name") == "Alice"
    assert node["age"] == 33
    assert node.get_property("colour") is None
    assert node.properties == {"name": "Alice", "age": 33}


def test_setting_none_removes_property():
    node = Node({"name": "Alice", "age": 33})
    node["age"] = None
    assert "age" not in node
    assert node.properties == {"name": "Alice"}


def test_none_values_are_dropped_on_construction():
    node = Node({"name": "Alice", "age": None})
    assert node.properties == {"name": "Alice"}


def test_remove_property():
    node = Node({"name": "Alice", "age": 33})
    del node["age"]
    node.remove_property("colour")
    assert node.properties == {"name": "Alice"}


def test_set_properties_replaces_all():
    node = Node({"name": "Alice", "age": 33})
    node.set_properties({"name": "Alicia", "tags": ["a", "b"]})
    assert node.properties == {"name": "Alicia", "tags": ["a", "b"]}


def test_properties_are_a_copy():
    node = Node({"name": "Alice"})
    node.properties["name"] = "Bob"
    assert node["name"] == "Alice"


def test_bind_sets_id_once():
    node = Node()
    node.bind(7)
    assert node.id == 7
    with raises(BindError):
        node.bind(8)
    with raises(BindError):
        node.bind(7)
    assert node.id == 7


def test_unbind_clears_id():
    node = Node()
    node.bind(7)
    node.unbind()
    assert node.id is None
    node.bind(9)
    assert node.id == 9


def test_equality_by_kind_and_id():
    a, b, r = Node(), Node(), Relationship()
    assert a != b
    a.bind(1)
    b.bind(1)
    r.bind(1)
    assert a == b
    assert hash(a) == hash(b)
    assert a != r


def test_unbound_entities_are_only_equal_to_themselves():
    a = Node({"name": "Alice"})
    assert a == a
    assert a != Node({"name": "Alice"})


def test_entity_without_client_cannot_save():
    with raises(BindError):
        Node().save()
    with raises(BindError):
        Relationship().load()


def test_node_repr():
    node = Node({"name": "Alice"})
    assert repr(node) == "<Node properties={'name': 'Alice'}>"


def test_unloaded_relationship_repr_hides_properties(client):
    rel = client.get_relationship(3)
    assert repr(rel) == "<Relationship id=3 type=None properties=?>"


def test_relationship_fields():
    a, b = Node(), Node()
    rel = Relationship(a, "KNOWS", b, {"since": 1999})
    assert rel.start_node is a
    assert rel.end_node is b
    assert rel.type == "KNOWS"
    assert rel["since"] == 1999


def test_relationship_setters_do_not_validate():
    rel = Relationship()
    rel.type = ""
    rel.start_node = None
    assert rel.type == ""
    assert rel.start_node is None


def test_default_unique_action():
    rel = Relationship()
    assert rel.unique_action == Relationship.GET_OR_CREATE == "get_or_create"


def test_unique_fields_round_trip():
    rel = Relationship()
    assert rel.unique_key is None
    assert rel.unique_value is None
    assert not rel.is_unique()
    rel.unique_value = 12
    assert rel.unique_value == 12
    assert rel.unique_key is None
    assert not rel.is_unique()
    rel.unique_key = "email"
    assert rel.set_unique_action(Relationship.CREATE_OR_FAIL) is True
    assert rel.unique_key == "email"
    assert rel.unique_value == 12
    assert rel.unique_action == "create_or_fail"
    assert rel.is_unique()


def test_unique_key_alone_makes_unique():
    rel = Relationship()
    rel.unique_key = "email"
    assert rel.is_unique()
    assert rel.unique_value is None


def test_bogus_unique_action_is_rejected():
    rel = Relationship()
    assert rel.set_unique_action("bogus") is False
    assert rel.unique_action == Relationship.GET_OR_CREATE
    rel.set_unique_action(Relationship.CREATE_OR_FAIL)
    assert rel.set_unique_action(None) is False
    assert rel.unique_action == Relationship.CREATE_OR_FAIL


def test_reset_uniqueness():
    rel = Relationship()
    rel.unique_key = "email"
    rel.unique_value = "alice@example.com"
    rel.set_unique_action(Relationship.CREATE_OR_FAIL)
    rel.reset_uniqueness()
    assert not rel.is_unique()
    assert rel.unique_key is None
    assert rel.unique_value is None
    assert rel.unique_action == Relationship.CREATE_OR_FAIL


def test_client_is_propagated_to_orphaned_nodes(client):
    a, b = Node(), Node()
    rel = Relationship(a, "KNOWS", b)
    rel.client = client
    assert a.client is client
    assert b.client is client


def test_client_is_not_overridden_on_nodes(client):
    other = object()
    a, b = Node(client=other), Node()
    rel = Relationship(a, "KNOWS", b, client=client)
    assert a.client is other
    assert b.client is client
    assert rel.client is client


def test_nodes_set_later_adopt_client(client):
    rel = client.make_relationship()
    a = Node()
    rel.end_node = a
    assert a.client is client


def test_relationship_never_changes_its_nodes_on_delete(transport, client, alice, bob):
    rel = Relationship(alice, "KNOWS", bob, client=client)
    rel.bind(5)
    transport.respond(204)
    rel.delete()
    assert rel.id is None
    assert alice.id == 1
    assert bob.id == 2
    assert rel.start_node is alice
