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
Console output for the ``neorest`` loggers.

The transport logs each exchange as a series of lines prefixed with a
direction marker: ``>`` for what was sent, ``<`` for what came back and
``!`` for an exchange that failed outright. Commands log one line each,
naming the command and its request. :func:`watch` shows all of this on a
terminal, with each kind of line in its own colour::

    >>> from neorest.diagnostics import watch
    >>> watch("neorest", verbosity=1)

"""


from logging import CRITICAL, ERROR, WARNING, INFO, DEBUG, Formatter, StreamHandler, getLogger
from sys import stderr


__all__ = ["ExchangeFormatter", "Watcher", "watch"]


#: Logger at the root of the package hierarchy.
ROOT_LOGGER = "neorest"


class ExchangeFormatter(Formatter):
    """ Formatter that colours transport lines by direction and every
    other line by level.
    """

    direction_colours = {
        ">": "cyan",
        "<": "lime",
        "!": "red",
    }

    level_colours = {
        CRITICAL: "red",
        ERROR: "maroon",
        WARNING: "yellow",
        INFO: "white",
    }

    def __init__(self, fmt="%(asctime)s  %(name)-16s  %(message)s"):
        super(ExchangeFormatter, self).__init__(fmt)

    def colour(self, record):
        """ Name of the :mod:`pansi.codes` colour for `record`, or
        :const:`None` to leave it plain.
        """
        if record.name.startswith(ROOT_LOGGER + ".http"):
            colour = self.direction_colours.get(record.getMessage()[:1])
            if colour:
                return colour
        return self.level_colours.get(record.levelno)

    def format(self, record):
        from pansi import codes
        s = super(ExchangeFormatter, self).format(record)
        colour = self.colour(record)
        if colour is None:
            return s
        return "{}{}{}".format(getattr(codes, colour), s, codes.reset)


def level_for(verbosity):
    """ Map a verbosity number onto a logging level: 1 or more is
    DEBUG, 0 is INFO, -1 WARNING, -2 ERROR and anything lower CRITICAL.
    """
    if verbosity > 0:
        return DEBUG
    return {0: INFO, -1: WARNING, -2: ERROR}.get(verbosity, CRITICAL)


class Watcher(object):
    """ Log watcher for the client, its commands and its transport.
    With no logger names, the whole ``neorest`` hierarchy is watched::

        >>> from neorest.diagnostics import Watcher
        >>> with Watcher("neorest.http"):
        ...     client.get_node(1, force=True)

    """

    def __init__(self, *logger_names):
        self.logger_names = logger_names or (ROOT_LOGGER,)
        self.loggers = [getLogger(name) for name in self.logger_names]
        self.formatter = ExchangeFormatter()
        self.handler = None

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()

    def start(self, verbosity=0, out=stderr):
        """ Attach a stream handler writing to `out` to each watched
        logger, replacing any handler attached by an earlier call.
        See :func:`level_for` for the meaning of `verbosity`.
        """
        self.stop()
        self.handler = StreamHandler(out)
        self.handler.setFormatter(self.formatter)
        level = level_for(verbosity)
        for logger in self.loggers:
            logger.addHandler(self.handler)
            logger.setLevel(level)

    def stop(self):
        if self.handler is None:
            return
        for logger in self.loggers:
            logger.removeHandler(self.handler)
        self.handler = None


def watch(logger_name=ROOT_LOGGER, verbosity=0, out=stderr):
    """ Start watching a logger, by default the whole ``neorest``
    hierarchy, and return the :class:`.Watcher` so it can be stopped.
    """
    watcher = Watcher(logger_name)
    watcher.start(verbosity, out)
    return watcher
