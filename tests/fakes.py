"""Test doubles for the Firebase admin client."""


class FakeAdminClient:
    """Stands in for AdminClient; records every call."""

    def __init__(self, users=None, error=None):
        self.users = users if users is not None else []
        self.error = error
        self.calls = []

    def list_users(self, max_results):
        self.calls.append(max_results)
        if self.error is not None:
            raise self.error
        return self.users
