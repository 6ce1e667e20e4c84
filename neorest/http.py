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


from json import dumps as json_dumps, loads as json_loads
from logging import getLogger

from urllib3 import HTTPConnectionPool, HTTPSConnectionPool, Timeout, make_headers
from urllib3.exceptions import HTTPError

from neorest.config import ConnectionProfile
from neorest.errors import TransportError
from neorest.meta import http_user_agent


__all__ = ["HTTPTransport"]


log = getLogger(__name__)


class HTTPTransport(object):
    """ Sends single JSON requests to a Neo4j REST endpoint.

    Each call to :meth:`.request` is one synchronous HTTP exchange over
    a single pooled connection. Nothing is retried; any network-level
    failure surfaces as a :class:`.TransportError`.
    """

    def __init__(self, profile=None, user_agent=None):
        if not isinstance(profile, ConnectionProfile):
            profile = ConnectionProfile(profile)
        self.profile = profile
        self.headers = make_headers(basic_auth=":".join(profile.auth),
                                    user_agent=(user_agent or http_user_agent()))
        self.headers["Accept"] = "application/json"
        self.headers["Content-Type"] = "application/json"
        self.headers["X-Stream"] = "true"
        self.http_pool = None
        self.__closed = False
        self._make_pool(profile)

    def __repr__(self):
        return "<%s endpoint=%r>" % (self.__class__.__name__, self.endpoint)

    def _make_pool(self, profile):
        timeout = Timeout(connect=profile.timeout, read=profile.timeout)
        if profile.secure:
            from ssl import CERT_NONE, CERT_REQUIRED
            from certifi import where as cert_where
            self.http_pool = HTTPSConnectionPool(
                host=profile.host,
                port=profile.port,
                maxsize=1,
                block=True,
                timeout=timeout,
                retries=False,
                cert_reqs=CERT_REQUIRED if profile.verify else CERT_NONE,
                ca_certs=cert_where()
            )
        else:
            self.http_pool = HTTPConnectionPool(
                host=profile.host,
                port=profile.port,
                maxsize=1,
                block=True,
                timeout=timeout,
                retries=False,
            )

    @property
    def endpoint(self):
        """ The absolute URI of the database root, e.g.
        ``http://localhost:7474/db/data``.
        """
        return self.profile.endpoint

    @property
    def closed(self):
        return self.__closed

    def close(self):
        if self.http_pool is not None:
            self.http_pool.close()
        self.__closed = True

    def request(self, method, path, body=None):
        """ Send a request and return a 3-tuple of status code,
        response headers and decoded response content.

        :param method: HTTP method, e.g. ``'POST'``
        :param path: path relative to the database root, e.g. ``'/node/1'``
        :param body: JSON-serialisable request body, or :const:`None`
        :raise TransportError: if the exchange itself fails
        """
        url = self.profile.path + path
        if body is None:
            data = None
        else:
            data = json_dumps(body, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
        log.debug("> %s %s", method, url)
        if data is not None:
            log.debug("> %s", data.decode("utf-8"))
        try:
            r = self.http_pool.urlopen(method, url, body=data, headers=dict(self.headers))
        except HTTPError as error:
            log.error("! %s %s failed: %s", method, url, error)
            raise TransportError("%s %s failed: %s" % (method, url, error)) from error
        content = self._decode(r.data)
        log.debug("< %s", r.status)
        if content is not None:
            log.debug("< %r", content)
        return r.status, r.headers, content

    @staticmethod
    def _decode(data):
        if not data:
            return None
        text = data.decode("utf-8")
        try:
            return json_loads(text)
        except ValueError:
            return text
