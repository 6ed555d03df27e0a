"""app: handle requests."""

import uuid
from typing import Dict

from aws_lambda_restify import API, Controller, Restify, StatusCode

app = API(name="app", debug=True)
restify = app.plugin(Restify, validator="uuid")

restify.routes(
    app.routes,
    {
        "users": {"messages": None},
        "news": [None, {"validator": "standard"}],
    },
)

USERS: Dict[str, Dict] = {}
MESSAGES: Dict[str, Dict[str, str]] = {}


@app.controller("users")
class Users(Controller):
    def under(self):
        user = USERS.get(self.restify.current_id())
        if user is None:
            self.not_found("No such user")
            return False
        self.stash["user"] = user
        return True

    def list(self):
        return self.render(json=list(USERS.values()))

    def create(self):
        user = {"id": str(uuid.uuid4()), "name": self.stash.get("body", "")}
        USERS[user["id"]] = user
        return self.render(json=user, status=StatusCode.CREATED)

    def read(self):
        return self.render(json=self.stash["user"])

    def delete(self):
        USERS.pop(self.stash["user"]["id"])


@app.controller("users-messages")
class Messages(Controller):
    def list(self):
        return self.render(json=MESSAGES.get(self.stash["user"]["id"], {}))

    def read(self):
        messages = MESSAGES.get(self.stash["user"]["id"], {})
        message_id = self.restify.current_id()
        if message_id not in messages:
            return self.not_found("No such message")
        return self.render(text=messages[message_id])


@app.controller("news")
class News(Controller):
    def read(self):
        return self.render(text=f"news {self.stash['news_id']}")

