from tinyorm import Model


class User(Model):
    """Registered user.

    @property-read string $email Login address
    """

    __table__ = "users"

    def posts(self):
        from app.models.post import Post

        return self.has_many(Post)

    def get_full_name_attribute(self):
        return f"{self.get_attribute('first_name')} {self.get_attribute('last_name')}"

    def set_password_attribute(self, value):
        self.set_attribute("password", value)

    def scope_active(self, query):
        return query.where("active", True)

    def scope_of_type(self, query, kind, strict=True, tags=None):
        return query.where("kind", kind)

    def display(self):
        return str(self.get_attribute("name"))
