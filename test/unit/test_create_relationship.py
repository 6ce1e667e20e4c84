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


from pytest import fixture, raises

from neorest import Node, Relationship
from neorest.commands import CreateRelationship
from neorest.errors import RequestFailure, ConflictError, RelationshipExistsError, ValidationError


@fixture
def knows(client, alice, bob):
    rel = client.make_relationship({"since": 1999})
    rel.start_node = alice
    rel.end_node = bob
    rel.type = "KNOWS"
    return rel


def test_ordinary_relationship_request(client, knows):
    command = CreateRelationship(client, knows)
    assert command.method == "POST"
    assert command.path() == "/node/1/relationships"
    assert command.data() == {
        "type": "KNOWS",
        "to": "http://localhost:7474/db/data/node/2",
        "data": {"since": 1999},
    }


def test_ordinary_relationship_without_properties_has_no_data(client, alice, bob):
    rel = Relationship(alice, "KNOWS", bob, client=client)
    data = CreateRelationship(client, rel).data()
    assert data == {"type": "KNOWS", "to": "http://localhost:7474/db/data/node/2"}


def test_unique_relationship_request(client, knows):
    knows.unique_key = "pair"
    knows.unique_value = "alice-bob"
    command = CreateRelationship(client, knows)
    assert command.method == "POST"
    assert command.path() == "/index/relationship/KNOWS?uniqueness=get_or_create"
    data = command.data()
    assert data == {
        "type": "KNOWS",
        "key": "pair",
        "value": "alice-bob",
        "start": "http://localhost:7474/db/data/node/1",
        "end": "http://localhost:7474/db/data/node/2",
        "data": {"since": 1999},
    }
    assert "to" not in data


def test_unique_relationship_request_with_create_or_fail(client, knows):
    knows.unique_key = "pair"
    knows.unique_value = "alice-bob"
    assert knows.set_unique_action(Relationship.CREATE_OR_FAIL)
    command = CreateRelationship(client, knows)
    assert command.path() == "/index/relationship/KNOWS?uniqueness=create_or_fail"


def test_unique_relationship_type_is_encoded_in_path(client, knows):
    knows.type = "LIKES A LOT"
    knows.unique_key = "pair"
    command = CreateRelationship(client, knows)
    assert command.path() == "/index/relationship/LIKES%20A%20LOT?uniqueness=get_or_create"


def test_value_without_key_is_not_unique(client, knows):
    knows.unique_value = "alice-bob"
    assert not knows.is_unique()
    assert CreateRelationship(client, knows).path() == "/node/1/relationships"


def test_reset_uniqueness_restores_ordinary_request(transport, knows):
    knows.unique_key = "pair"
    knows.unique_value = "alice-bob"
    knows.reset_uniqueness()
    assert not knows.is_unique()
    transport.respond(201, {"Location": "http://localhost:7474/db/data/relationship/5"})
    knows.save()
    method, path, body = transport.last_request
    assert (method, path) == ("POST", "/node/1/relationships")
    assert "to" in body
    for key in ("key", "value", "start", "end"):
        assert key not in body


def test_missing_start_node_fails_without_request(transport, client, bob):
    rel = Relationship(None, "KNOWS", bob, client=client)
    with raises(ValidationError) as e:
        rel.save()
    assert "start node" in str(e.value)
    assert transport.requests == []


def test_unbound_start_node_fails_without_request(transport, client, bob):
    rel = Relationship(Node({"name": "Carol"}), "KNOWS", bob, client=client)
    with raises(ValidationError):
        rel.save()
    assert transport.requests == []


def test_missing_end_node_fails_without_request(transport, client, alice):
    rel = Relationship(alice, "KNOWS", None, client=client)
    with raises(ValidationError) as e:
        rel.save()
    assert "end node" in str(e.value)
    assert transport.requests == []


def test_missing_type_fails_without_request(transport, client, alice, bob):
    rel = Relationship(alice, None, bob, client=client)
    with raises(ValidationError) as e:
        rel.save()
    assert "type" in str(e.value)
    assert transport.requests == []


def test_missing_type_fails_for_unique_relationship(transport, client, alice, bob):
    rel = Relationship(alice, "", bob, client=client)
    rel.unique_key = "pair"
    with raises(ValidationError):
        rel.save()
    assert transport.requests == []


def test_id_from_location_header(transport, client, knows):
    transport.respond(201, {"Location": "http://host/relationship/42"})
    knows.save()
    assert knows.id == 42
    assert client.cache.get_cached_entity(42, "relationship") is knows


def test_location_header_name_is_case_insensitive(transport, client, knows):
    transport.respond(201, {"location": "http://host/relationship/9"})
    knows.save()
    assert knows.id == 9
    assert client.cache.get_cached_entity(9, "relationship") is knows


def test_id_from_nested_body(transport, client, knows):
    transport.respond(201, {}, {"body": {"self": "http://host/relationship/77"}})
    knows.save()
    assert knows.id == 77
    assert client.cache.get_cached_entity(77, "relationship") is knows


def test_id_from_body_self(transport, client, knows):
    transport.respond(200, {}, {"self": "http://host/relationship/78", "type": "KNOWS",
                                "start": "http://host/node/1", "end": "http://host/node/2"})
    knows.unique_key = "pair"
    knows.unique_value = "alice-bob"
    knows.save()
    assert knows.id == 78


def test_save_disables_lazy_load(transport, knows):
    transport.respond(201, {"Location": "http://host/relationship/42"})
    assert knows.lazy_load
    knows.save()
    assert not knows.lazy_load


def test_bad_request_leaves_relationship_untouched(transport, client, knows):
    transport.respond(400, {}, {"message": "Bad request", "exception": "BadInputException"})
    with raises(RequestFailure) as e:
        knows.save()
    assert e.value.status_code == 400
    assert e.value.exception == "BadInputException"
    assert knows.id is None
    assert len(client.cache) == 0
    assert knows.lazy_load


def test_conflict_on_ordinary_relationship_is_request_failure(transport, client, knows):
    transport.respond(409, {}, {"message": "Conflict"})
    with raises(RequestFailure) as e:
        knows.save()
    assert isinstance(e.value, ConflictError)
    assert not isinstance(e.value, RelationshipExistsError)
    assert knows.id is None
    assert len(client.cache) == 0


def test_create_or_fail_conflict_is_distinguishable(transport, client, knows):
    knows.unique_key = "pair"
    knows.unique_value = "alice-bob"
    knows.set_unique_action(Relationship.CREATE_OR_FAIL)
    existing = {"self": "http://host/relationship/9", "type": "KNOWS",
                "start": "http://host/node/1", "end": "http://host/node/2", "data": {}}
    transport.respond(409, {}, existing)
    with raises(RelationshipExistsError) as e:
        knows.save()
    assert isinstance(e.value, RequestFailure)
    assert e.value.status_code == 409
    assert e.value.content == existing
    assert knows.id is None
    assert len(client.cache) == 0


def test_get_or_create_failure_is_generic(transport, knows):
    knows.unique_key = "pair"
    knows.unique_value = "alice-bob"
    transport.respond(409, {}, None)
    with raises(ConflictError) as e:
        knows.save()
    assert not isinstance(e.value, RelationshipExistsError)


def test_success_without_identity_is_failure(transport, client, knows):
    transport.respond(201, {}, None)
    with raises(RequestFailure):
        knows.save()
    assert knows.id is None
    assert len(client.cache) == 0


def test_get_or_create_existing_relationship_replaces_cached_instance(transport, client, knows):
    existing = client.get_relationship(9)
    knows.unique_key = "pair"
    knows.unique_value = "alice-bob"
    transport.respond(200, {}, {"self": "http://host/relationship/9", "type": "KNOWS",
                                "start": "http://host/node/1", "end": "http://host/node/2"})
    knows.save()
    assert knows.id == 9
    assert client.get_relationship(9) is knows
    assert existing.id == 9
    assert existing not in client.cache
