class NumericSet:
    """Append-only set of integer ids"""

    def __init__(self):
        self._lookup = set()

    def add(self, value):
        self._lookup.add(value)

    def __contains__(self, value):
        return value in self._lookup


class NumericMap:
    """Map from integer id to value that remembers insertion order"""

    def __init__(self):
        self._lookup = {}

    def contains_key(self, key):
        return key in self._lookup

    def set(self, key, value):
        self._lookup[key] = value

    def values(self):
        return list(self._lookup.values())
