"""
Basic usage example for AyeAye.

This example demonstrates:
- Nested controllers reached by path segment
- Endpoints selected by HTTP verb
- Parameters bound by name from the query string or body
- Self-documentation of controllers without an index endpoint

Run it and try:
    curl http://localhost:8000/
    curl http://localhost:8000/users
    curl http://localhost:8000/users/find.xml?user_id=1
    curl -X POST -d '{"name": "Carol", "email": "carol@example.com"}' http://localhost:8000/users
"""

from wsgiref.simple_server import make_server

from ayeaye import Api, ApiError, Controller, WSGIDriver, controller, endpoint

# In-memory data store for this example
users_db = {
    "1": {"id": "1", "name": "Alice", "email": "alice@example.com"},
    "2": {"id": "2", "name": "Bob", "email": "bob@example.com"},
}


class UsersController(Controller):
    """Manage users."""

    @endpoint("GET")
    def get_index(self):
        """List every user."""
        return list(users_db.values())

    @endpoint("POST", "index")
    def create(self, name: str, email: str) -> dict:
        """Create a user.

        Args:
            name: Display name
            email: Contact address

        Returns:
            The new user record
        """
        user_id = str(len(users_db) + 1)
        users_db[user_id] = {"id": user_id, "name": name, "email": email}
        self.set_status(201)
        return users_db[user_id]

    @endpoint("GET", "find")
    def find(self, user_id: str) -> dict:
        """Find one user.

        Args:
            user_id: The id of the user

        Returns:
            The user record
        """
        if user_id not in users_db:
            raise ApiError(f"No user with id {user_id}", code=404, public_message="User not found")
        return users_db[user_id]


class RootController(Controller):
    """Example api."""

    @controller
    def users(self):
        """Manage users."""
        return UsersController()

    @endpoint("GET", "health-check")
    def health(self):
        """Report that the service is up."""
        return {"status": "healthy"}


api = Api(RootController())
app = WSGIDriver(api)


if __name__ == "__main__":
    with make_server("", 8000, app) as server:
        print("Serving on http://localhost:8000")
        server.serve_forever()
