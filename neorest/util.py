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
Utility module
"""


from urllib.parse import urlsplit


def id_from_uri(uri):
    """ Extract the numeric entity ID from a URI such as
    ``http://localhost:7474/db/data/relationship/42``.

    :raise ValueError: if the last path segment is not an integer
    """
    path = urlsplit(uri).path.rstrip("/")
    segment = path.rpartition("/")[-1]
    try:
        return int(segment)
    except ValueError:
        raise ValueError("No entity ID found in URI %r" % uri)


def is_success(status_code):
    return status_code // 100 == 2
