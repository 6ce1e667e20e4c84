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
from os import getenv
from urllib.parse import urlsplit


__all__ = ["ConnectionProfile"]


NEO4J_URI = getenv("NEO4J_URI")
NEO4J_AUTH = getenv("NEO4J_AUTH")
NEO4J_SECURE = True if getenv("NEO4J_SECURE") == "1" else False if getenv("NEO4J_SECURE") == "0" else None
NEO4J_VERIFY = True if getenv("NEO4J_VERIFY") == "1" else False if getenv("NEO4J_VERIFY") == "0" else None
NEO4J_TIMEOUT = float(getenv("NEO4J_TIMEOUT")) if getenv("NEO4J_TIMEOUT") else None


DEFAULT_SECURE = False
DEFAULT_VERIFY = True
DEFAULT_USER = "neo4j"
DEFAULT_PASSWORD = "password"
DEFAULT_HOST = "localhost"
DEFAULT_HTTP_PORT = 7474
DEFAULT_HTTPS_PORT = 7473
DEFAULT_TIMEOUT = 30.0
DEFAULT_DATA_PATH = "/db/data"


class ConnectionProfile(Mapping):
    """ Connection details for a Neo4j REST service.

    A connection profile holds a set of values that describe how to
    connect to, and authorise against, a particular Neo4j server.
    The values are available as either object attributes (e.g.
    ``profile.uri``) or sub-items (e.g. ``profile["uri"]``).

    :param profile:
        The base connection information, provided as a dictionary, an
        existing :class:`.ConnectionProfile` object or a string URI.
        This value can also be :const:`None`, in which case default
        base settings are used.

    :param settings:
        An optional set of individual overrides for each value.
        Valid options are: ``auth`` (a 2-tuple or a ``'user:password'``
        string), ``host``, ``password``, ``path``, ``port``, ``scheme``,
        ``secure``, ``timeout``, ``user`` and ``verify``.

    Defaults describe a local server listening on the default HTTP
    port, with the password ``password``. These can be altered via
    environment variables:

    .. envvar :: NEO4J_URI

    .. envvar :: NEO4J_AUTH

    .. envvar :: NEO4J_SECURE

    .. envvar :: NEO4J_VERIFY

    .. envvar :: NEO4J_TIMEOUT

    """

    __keys = ("secure", "verify", "scheme", "user", "password", "host", "port",
              "path", "timeout", "auth", "protocol", "uri", "endpoint")

    __hash_keys = ("secure", "verify", "scheme", "user", "password", "host", "port", "path")

    def __init__(self, profile=None, **settings):
        self.__scheme = None
        self.__secure = None
        self.__verify = None
        self.__user = None
        self.__password = None
        self.__host = None
        self.__port = None
        self.__path = None
        self.__timeout = None

        if profile is None:
            if NEO4J_URI:
                self._apply_base_uri(NEO4J_URI)
        elif isinstance(profile, str):
            self._apply_base_uri(profile)
        elif isinstance(profile, Mapping):
            settings = dict(profile, **settings)
        else:
            raise TypeError("Profile %r is neither a ConnectionProfile "
                            "nor a string URI" % profile)

        self._apply_auth(**settings)
        self._apply_components(**settings)
        self._apply_fallback_defaults()

    def __repr__(self):
        return "%s(%r)" % (self.__class__.__name__, self.uri)

    def __getitem__(self, key):
        if key in self.__keys:
            return getattr(self, key)
        else:
            raise KeyError(key)

    def __len__(self):
        return len(self.__keys)

    def __iter__(self):
        return iter(self.__keys)

    def __hash__(self):
        return hash(tuple(getattr(self, key) for key in self.__hash_keys))

    def __eq__(self, other):
        try:
            return all(getattr(self, key) == getattr(other, key) for key in self.__hash_keys)
        except AttributeError:
            return False

    def __ne__(self, other):
        return not self.__eq__(other)

    def _apply_base_uri(self, uri):
        parsed = urlsplit(uri)
        if parsed.scheme:
            self.__scheme = parsed.scheme
            if self.__scheme == "https":
                self.__secure = True
            elif self.__scheme == "http":
                self.__secure = False
            else:
                raise ValueError("Unsupported URI scheme %r" % self.__scheme)
        self.__user = parsed.username or None
        self.__password = parsed.password or None
        self.__host = parsed.hostname or None
        self.__port = parsed.port
        if parsed.path and parsed.path != "/":
            self.__path = parsed.path.rstrip("/")

    def _apply_auth(self, **settings):
        if settings.get("auth") is not None:
            if isinstance(settings["auth"], str):
                self.__user, _, self.__password = settings["auth"].partition(":")
            else:
                self.__user, self.__password = settings["auth"]
        elif NEO4J_AUTH is not None and self.__user is None:
            self.__user, _, self.__password = NEO4J_AUTH.partition(":")

    def _apply_components(self, **settings):
        self.__secure = self._coalesce(settings.get("secure"), self.__secure, NEO4J_SECURE)
        self.__verify = self._coalesce(settings.get("verify"), self.__verify, NEO4J_VERIFY)
        self.__scheme = self._coalesce(settings.get("scheme"), self.__scheme)
        self.__user = self._coalesce(settings.get("user"), self.__user)
        self.__password = self._coalesce(settings.get("password"), self.__password)
        self.__host = self._coalesce(settings.get("host"), self.__host)
        self.__port = self._coalesce(settings.get("port"), self.__port)
        self.__path = self._coalesce(settings.get("path"), self.__path)
        self.__timeout = self._coalesce(settings.get("timeout"), self.__timeout, NEO4J_TIMEOUT)
        if settings.get("scheme") == "https":
            self.__secure = True

    def _apply_fallback_defaults(self):
        if self.__secure is None:
            self.__secure = DEFAULT_SECURE
        if self.__verify is None:
            self.__verify = DEFAULT_VERIFY
        self.__scheme = "https" if self.__secure else "http"
        if not self.__user:
            self.__user = DEFAULT_USER
        if not self.__password:
            self.__password = DEFAULT_PASSWORD
        if not self.__host:
            self.__host = DEFAULT_HOST
        if not self.__port:
            self.__port = DEFAULT_HTTPS_PORT if self.__secure else DEFAULT_HTTP_PORT
        self.__port = int(self.__port)
        if not self.__path:
            self.__path = DEFAULT_DATA_PATH
        elif not self.__path.startswith("/"):
            self.__path = "/" + self.__path
        self.__path = self.__path.rstrip("/")
        if self.__timeout is None:
            self.__timeout = DEFAULT_TIMEOUT
        self.__timeout = float(self.__timeout)

    @staticmethod
    def _coalesce(*values):
        """ Utility function to return the first non-null value from a
        sequence of values.
        """
        for value in values:
            if value is not None:
                return value
        return None

    @property
    def secure(self):
        """ A flag for whether or not to use HTTPS. If unspecified,
        and uninfluenced by environment variables, this will default
        to :const:`False`.
        """
        return self.__secure

    @property
    def verify(self):
        """ A flag for verification of remote server certificates.
        If unspecified, and uninfluenced by environment variables, this
        will default to :const:`True`.
        """
        return self.__verify

    @property
    def scheme(self):
        """ Either ``'http'`` or ``'https'``, depending on :attr:`.secure`.
        """
        return self.__scheme

    @property
    def user(self):
        return self.__user

    @property
    def password(self):
        return self.__password

    @property
    def host(self):
        return self.__host

    @property
    def port(self):
        return self.__port

    @property
    def path(self):
        """ The path of the database root on the server, by default
        ``'/db/data'``.
        """
        return self.__path

    @property
    def timeout(self):
        """ Socket timeout in seconds, applied to both connect and read.
        """
        return self.__timeout

    @property
    def auth(self):
        """ A 2-tuple of `(user, password)`.
        """
        return self.__user, self.__password

    @property
    def protocol(self):
        """ The name of the underlying protocol. This is always ``'http'``,
        regardless of security and verification settings.
        """
        return "http"

    @property
    def uri(self):
        """ A full URI for the profile, excluding the password.
        """
        return "%s://%s@%s:%s" % (self.scheme, self.user, self.host, self.port)

    @property
    def endpoint(self):
        """ The absolute URI of the database root, against which all
        entity paths are resolved.
        """
        return "%s://%s:%s%s" % (self.scheme, self.host, self.port, self.path)
