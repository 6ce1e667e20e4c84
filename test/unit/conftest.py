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


from pytest import fixture

from neorest import Client


class FakeTransport(object):
    """ Records every request and plays back queued responses.
    """

    endpoint = "http://localhost:7474/db/data"

    def __init__(self):
        self.requests = []
        self.responses = []

    def respond(self, status, headers=None, content=None):
        self.responses.append((status, headers or {}, content))

    def request(self, method, path, body=None):
        self.requests.append((method, path, body))
        if not self.responses:
            raise AssertionError("Unexpected request %s %s" % (method, path))
        return self.responses.pop(0)

    @property
    def last_request(self):
        return self.requests[-1]


@fixture
def transport():
    return FakeTransport()


@fixture
def client(transport):
    return Client(transport=transport)


@fixture
def alice(client):
    node = client.make_node({"name": "Alice"})
    node.bind(1)
    node.use_lazy_load(False)
    return node


@fixture
def bob(client):
    node = client.make_node({"name": "Bob"})
    node.bind(2)
    node.use_lazy_load(False)
    return node
