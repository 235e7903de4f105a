import logging

from rich.logging import RichHandler
from rich.pretty import pprint

from slashmatch import *

__prog__ = "events-bot"

logging.basicConfig(level=logging.DEBUG, format="%(message)s", handlers=[RichHandler()])

schema = CommandSchema.from_payload({
    "name": "event",
    "options": [
        {"name": "create", "type": 1, "options": [
            {"name": "title", "type": 3, "required": True},
            {"name": "attendees", "type": 4, "required": True, "min_value": 1},
            {"name": "host", "type": 6},
        ]},
        {"name": "delete", "type": 1, "options": [
            {"name": "id", "type": 4, "required": True},
        ]},
    ],
})

registry = HandlerRegistry()


@registry.command("event create")
def create(match):
    title = match.required("title", str)
    attendees = match.required("attendees", int)
    host = match.optional("host", Snowflake)
    return "created %r for %d attendees%s" % (title, attendees, f" hosted by {host.mention}" if host else "")


@registry.command("event delete")
def delete(match):
    return "deleted event #%d" % match.required("id", int)


if __name__ == '__main__':
    pprint(schema)
    pprint(dispatch({
        "name": "event",
        "options": [{"name": "create", "type": 1, "options": [
            {"name": "title", "type": 3, "value": "Launch"},
            {"name": "attendees", "type": 4, "value": 5},
            {"name": "host", "type": 6, "value": "80351110224678912"},
        ]}],
    }, schema, registry))
    pprint(dispatch({
        "name": "event",
        "options": [{"name": "create", "type": 1, "options": [
            {"name": "title", "type": 3, "value": "Launch"},
            {"name": "attendees", "type": 4, "value": "5"},
        ]}],
    }, schema, registry, shell=True, fancy=True))
