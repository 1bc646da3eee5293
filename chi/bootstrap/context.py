"""Encoding contexts: the bijective name ⇄ id tables used to turn variables and constructors into numerals.

A context only ever grows. Sharing one context between several decompile calls is what keeps their numbering
consistent, e.g. to compare two encoded terms or to combine them into one program.
"""

import json
import logging

logger = logging.getLogger(__name__)


class IdTable:
    """Bijection between names and natural numbers, with a counter for the next id to hand out."""

    def __init__(self):
        self.ids = {}    # name: id
        self.names = {}  # id: name
        self.next_id = 0

    def allocate(self, name):
        """Returns the id of name, assigning the next unused id if name has none yet."""
        if name not in self.ids:
            self._bind(name, self.next_id)
            self.next_id += 1
        return self.ids[name]

    def assign(self, name, id):
        """Binds name to exactly id. If another name already holds id, that name is evicted to a fresh id, which
        invalidates any encoding that used its old id.
        """
        holder = self.names.get(id)
        if holder == name:
            return

        old_id = self.ids.pop(name, None)
        if old_id is not None:
            del self.names[old_id]

        if id >= self.next_id:
            self.next_id = id + 1
            self._bind(name, id)
        elif holder is not None:
            self._bind(name, id)
            logger.debug("evicting '%s' from id %d to id %d", holder, id, self.next_id)
            self._bind(holder, self.next_id)
            self.next_id += 1
        else:
            self._bind(name, id)

    def _bind(self, name, id):
        self.ids[name] = id
        self.names[id] = name

    def lookup(self, id):
        """Returns the name holding id, or None."""
        return self.names.get(id)

    def assignments(self):
        """Returns [(name, id), ...] ordered by id."""
        return sorted(self.ids.items(), key=lambda item: item[1])

    def to_dict(self):
        return {"assignments": [list(item) for item in self.assignments()], "next_id": self.next_id}

    @classmethod
    def from_dict(cls, data):
        table = cls()
        for name, id in data["assignments"]:
            table._bind(name, id)
        table.next_id = max([data.get("next_id", 0)] + [id + 1 for id in table.names])
        return table

    def __eq__(self, other):
        return isinstance(other, IdTable) and (self.ids, self.next_id) == (other.ids, other.next_id)

    def __repr__(self):
        return f"IdTable({self.assignments()}, next_id={self.next_id})"


class Context:
    """Encoding context: one IdTable for variables and an independent one for constructors."""

    def __init__(self, variables=None, constructors=None):
        self.variables = variables if variables is not None else IdTable()
        self.constructors = constructors if constructors is not None else IdTable()

    def allocate_variable_id(self, name):
        return self.variables.allocate(name)

    def allocate_constructor_id(self, name):
        return self.constructors.allocate(name)

    def assign_variable(self, name, id):
        """Binds variable name to id, see IdTable.assign."""
        self.variables.assign(name, id)

    def assign_constructor(self, name, id):
        """Binds constructor name to id, see IdTable.assign."""
        self.constructors.assign(name, id)

    def lookup_variable(self, id):
        return self.variables.lookup(id)

    def lookup_constructor(self, id):
        return self.constructors.lookup(id)

    def variable_assignments(self):
        return self.variables.assignments()

    def constructor_assignments(self):
        return self.constructors.assignments()

    def to_json(self):
        """Serializes both tables (ordered (name, id) pairs) and their counters."""
        return json.dumps({"variables": self.variables.to_dict(), "constructors": self.constructors.to_dict()})

    @classmethod
    def from_json(cls, text):
        data = json.loads(text)
        return cls(IdTable.from_dict(data["variables"]), IdTable.from_dict(data["constructors"]))

    def dump(self, path):
        with open(path, "w", encoding="utf-8") as file:
            file.write(self.to_json())

    @classmethod
    def load(cls, path):
        with open(path, "r", encoding="utf-8") as file:
            return cls.from_json(file.read())

    def __eq__(self, other):
        return isinstance(other, Context) and (self.variables, self.constructors) == (other.variables,
                                                                                       other.constructors)

    def __repr__(self):
        return f"Context(variables={self.variables!r}, constructors={self.constructors!r})"
