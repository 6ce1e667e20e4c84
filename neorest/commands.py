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
Commands translate one operation on one entity into a single REST
request, and the response to that request back into entity state.

Each command computes its path and body first, so that any
:class:`.ValidationError` is raised before anything is sent. A
non-2xx response raises a :class:`.RequestFailure` (or a more
specific subclass) and leaves the entity exactly as it was.
"""


from collections.abc import Mapping
from logging import getLogger
from urllib.parse import quote

from neorest.data import Node, Relationship
from neorest.errors import RequestFailure, RelationshipExistsError, ValidationError
from neorest.util import id_from_uri, is_success


__all__ = ["Command", "GetServerInfo",
           "CreateNode", "UpdateNode", "LoadNode", "DeleteNode",
           "CreateRelationship", "UpdateRelationship", "LoadRelationship", "DeleteRelationship"]


log = getLogger(__name__)


CONFLICT = 409


class Command(object):
    """ Base class for a single REST operation.
    """

    #: HTTP method used by this command.
    method = None

    def __init__(self, client):
        self.client = client

    @property
    def transport(self):
        return self.client.transport

    @property
    def cache(self):
        return self.client.cache

    def path(self):
        """ Path of the request, relative to the database root.
        """
        raise NotImplementedError("Method path must be overridden")

    def data(self):
        """ Body of the request, or :const:`None` for no body.
        """
        return None

    def execute(self):
        """ Build and send the request, then interpret the response.
        Response headers are looked up case-insensitively, whatever
        mapping the transport returns them in.
        """
        from urllib3._collections import HTTPHeaderDict
        path = self.path()
        data = self.data()
        log.info("%s: %s %s", self.__class__.__name__, self.method, path)
        code, headers, content = self.transport.request(self.method, path, data)
        return self.handle_result(code, HTTPHeaderDict(headers or {}), content)

    def handle_result(self, code, headers, data):
        """ Interpret the response, returning a command-specific result
        on success and raising on failure.
        """
        raise NotImplementedError("Method handle_result must be overridden")

    def throw_error(self, message, code, headers, data):
        log.warning("%s failed with status %s", self.__class__.__name__, code)
        raise RequestFailure.for_status(message, code, headers, data)

    def entity_uri(self, entity):
        return "%s/%s/%s" % (self.transport.endpoint, entity.kind, entity.id)

    @staticmethod
    def created_uri(headers, data):
        """ Find the URI of a newly created entity, preferring the
        ``Location`` header over the ``self`` member of the body.
        """
        location = headers.get("Location")
        if location:
            return location
        if isinstance(data, Mapping):
            if data.get("self"):
                return data["self"]
            body = data.get("body")
            if isinstance(body, Mapping) and body.get("self"):
                return body["self"]
        return None


class GetServerInfo(Command):

    method = "GET"

    def path(self):
        return "/"

    def handle_result(self, code, headers, data):
        if not is_success(code):
            self.throw_error("Unable to retrieve server info", code, headers, data)
        return dict(data or {})


class EntityCommand(Command):

    #: Noun used in validation and error messages.
    noun = None

    def __init__(self, client, entity):
        super(EntityCommand, self).__init__(client)
        self.entity = entity

    def entity_path(self):
        if not self.entity.has_id():
            raise ValidationError("No %s id specified" % self.noun)
        return "/%s/%s" % (self.entity.kind, self.entity.id)


class CreateNode(EntityCommand):

    method = "POST"
    noun = "node"

    def path(self):
        return "/node"

    def data(self):
        return self.entity.properties or None

    def handle_result(self, code, headers, data):
        if not is_success(code):
            self.throw_error("Unable to create node", code, headers, data)
        uri = self.created_uri(headers, data)
        if uri is None:
            self.throw_error("No location returned for created node", code, headers, data)
        self.entity.bind(id_from_uri(uri))
        self.cache.set_cached_entity(self.entity)
        return True


class UpdateEntity(EntityCommand):

    method = "PUT"

    def path(self):
        return self.entity_path() + "/properties"

    def data(self):
        return self.entity.properties

    def handle_result(self, code, headers, data):
        if not is_success(code):
            self.throw_error("Unable to update %s" % self.noun, code, headers, data)
        return True


class UpdateNode(UpdateEntity):

    noun = "node"


class UpdateRelationship(UpdateEntity):

    noun = "relationship"


class LoadNode(EntityCommand):

    method = "GET"
    noun = "node"

    def path(self):
        return self.entity_path()

    def handle_result(self, code, headers, data):
        if not is_success(code):
            self.throw_error("Unable to load node", code, headers, data)
        return Node.hydrate(self.client, data, self.entity)


class LoadRelationship(EntityCommand):

    method = "GET"
    noun = "relationship"

    def path(self):
        return self.entity_path()

    def handle_result(self, code, headers, data):
        if not is_success(code):
            self.throw_error("Unable to load relationship", code, headers, data)
        return Relationship.hydrate(self.client, data, self.entity)


class DeleteEntity(EntityCommand):

    method = "DELETE"

    def path(self):
        return self.entity_path()

    def handle_result(self, code, headers, data):
        if not is_success(code):
            self.throw_error("Unable to delete %s" % self.noun, code, headers, data)
        self.cache.delete_cached_entity(self.entity)
        self.entity.unbind()
        return True


class DeleteNode(DeleteEntity):

    noun = "node"


class DeleteRelationship(DeleteEntity):

    noun = "relationship"


class CreateRelationship(EntityCommand):
    """ Create a relationship, either directly from its start node or,
    if the relationship is unique, through the legacy relationship
    index named after its type::

        POST /node/{start}/relationships
        POST /index/relationship/{type}?uniqueness={action}

    Under ``get_or_create`` the server may answer with a relationship
    that already exists. The relationship being saved is then bound to
    that ID and replaces any other instance cached for it, so that
    :meth:`.Client.get_relationship` returns the object just saved.
    """

    method = "POST"
    noun = "relationship"

    @property
    def rel(self):
        return self.entity

    def check(self):
        """ Ensure that both nodes are bound and that there is a type.
        """
        start = self.rel.start_node
        if start is None or not start.has_id():
            raise ValidationError("No relationship start node specified")
        end = self.rel.end_node
        if end is None or not end.has_id():
            raise ValidationError("No relationship end node specified")
        if not self.rel.type:
            raise ValidationError("No relationship type specified")
        return start, end

    def path(self):
        start, _ = self.check()
        if self.rel.is_unique():
            return "/index/relationship/%s?uniqueness=%s" % (
                quote(self.rel.type, safe=""), self.rel.unique_action)
        else:
            return "/node/%s/relationships" % start.id

    def data(self):
        start, end = self.check()
        data = {"type": self.rel.type}
        if self.rel.is_unique():
            data["key"] = self.rel.unique_key
            data["value"] = self.rel.unique_value
            data["start"] = self.entity_uri(start)
            data["end"] = self.entity_uri(end)
        else:
            data["to"] = self.entity_uri(end)
        properties = self.rel.properties
        if properties:
            data["data"] = properties
        return data

    def handle_result(self, code, headers, data):
        if not is_success(code):
            if (code == CONFLICT and self.rel.is_unique() and
                    self.rel.unique_action == Relationship.CREATE_OR_FAIL):
                log.warning("Unique relationship already exists for %s=%r",
                            self.rel.unique_key, self.rel.unique_value)
                raise RelationshipExistsError("Unique relationship already exists",
                                              code, headers, data)
            self.throw_error("Unable to create relationship", code, headers, data)
        uri = self.created_uri(headers, data)
        if uri is None:
            self.throw_error("No location returned for created relationship", code, headers, data)
        self.rel.bind(id_from_uri(uri))
        self.cache.set_cached_entity(self.rel)
        return True
