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


from collections.abc import Mapping


__all__ = ["NeoRestError", "BindError", "ValidationError", "TransportError",
           "RequestFailure", "NotFoundError", "ConflictError", "RelationshipExistsError"]


class NeoRestError(Exception):
    """ Base class for all errors raised by this package.
    """


class BindError(NeoRestError):
    """ Raised when a local graph entity is not or cannot be bound to a
    remote graph entity, e.g. when an ID is assigned twice or when an
    entity has no client through which to reach the server.
    """


class ValidationError(NeoRestError, ValueError):
    """ Raised when the local state of an entity does not permit a
    command to be built. No request is sent when this is raised.
    """


class TransportError(NeoRestError):
    """ Raised when the HTTP exchange itself fails, such as on a
    timeout or a refused connection. The underlying error is
    available as ``__cause__``.
    """


class RequestFailure(NeoRestError):
    """ Raised when the server responds with a non-2xx status code.

    The full response is kept for diagnostics. Where the response body
    is a Neo4j error document, its ``exception``, ``fullname`` and
    ``stacktrace`` fields are exposed as attributes.
    """

    status_code = None

    @classmethod
    def for_status(cls, message, status_code, headers=None, content=None):
        """ Build an instance of the most specific subclass registered
        for `status_code`, falling back to `cls`.
        """
        error_cls = status_error_classes.get(status_code, cls)
        if not issubclass(error_cls, cls):
            error_cls = cls
        return error_cls(message, status_code, headers, content)

    def __init__(self, message, status_code, headers=None, content=None):
        super(RequestFailure, self).__init__(message)
        self.status_code = status_code
        self.headers = dict(headers or {})
        self.content = content
        if isinstance(content, Mapping):
            self.server_message = content.get("message")
            self.exception = content.get("exception")
            self.full_name = content.get("fullname")
            self.stack_trace = content.get("stacktrace")
        else:
            self.server_message = None
            self.exception = None
            self.full_name = None
            self.stack_trace = None

    def __str__(self):
        s = "%s [%s]" % (super(RequestFailure, self).__str__(), self.status_code)
        if self.server_message:
            s += ": %s" % self.server_message
        return s

    @property
    def message(self):
        return self.args[0]


class NotFoundError(RequestFailure):
    """ Raised when the server reports that a resource does not exist.
    """


class ConflictError(RequestFailure):
    """ Raised when a request conflicts with the current state of the
    remote graph.
    """


class RelationshipExistsError(ConflictError):
    """ Raised when a unique relationship is created with the
    ``create_or_fail`` policy and a relationship already satisfies
    the uniqueness constraint.
    """


status_error_classes = {
    404: NotFoundError,
    409: ConflictError,
}
