"""A minimal active-record ORM used as the model base in tests."""

import re


class Collection(list):
    pass


class Builder:
    def __init__(self, model):
        self.model = model
        self.wheres = []

    def where(self, column, value):
        self.wheres.append((column, value))
        return self


class Relation:
    def __init__(self, parent, related):
        self.parent = parent
        self._related = related

    def get_related(self):
        return self._related()


class HasMany(Relation):
    pass


class HasOne(Relation):
    pass


class BelongsTo(Relation):
    pass


class BelongsToMany(Relation):
    pass


class MorphMany(Relation):
    pass


class Model:
    __table__ = None
    __dates__ = ()

    def __init__(self, **attributes):
        self._attributes = dict(attributes)

    def get_table(self):
        if self.__table__:
            return self.__table__
        return re.sub(r"(?<!^)(?=[A-Z])", "_", type(self).__name__).lower() + "s"

    def get_dates(self):
        return ["created_at", "updated_at", *self.__dates__]

    def new_collection(self, models=()):
        return Collection(models)

    def new_query(self):
        return Builder(self)

    def get_attribute(self, key):
        return self._attributes.get(key)

    def set_attribute(self, key, value):
        self._attributes[key] = value

    def has_many(self, related):
        return HasMany(self, related)

    def has_one(self, related):
        return HasOne(self, related)

    def belongs_to(self, related):
        return BelongsTo(self, related)

    def belongs_to_many(self, related):
        return BelongsToMany(self, related)

    def morph_many(self, related):
        return MorphMany(self, related)

    def save(self):
        return True
