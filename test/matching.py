"""
Matching module behavioral tests (tree walker, command paths, argument access).

Scope
- Validate walk() on well-formed trees of depth 1 to 3 and on every malformed shape.
- Validate that decode faults carry the offending path and option name.
- Validate ArgumentMatch accessors: presence, strict variants, early exits, entities.
- Validate CommandPath construction and string forms.

Conventions
- Test method names follow CamelCase per project convention.
- Interactions are written as the decoded JSON the platform sends.
"""

from __future__ import annotations

import unittest
from types import MappingProxyType
from unittest import TestCase

from slashmatch import (
    ArgumentMatch,
    CommandPath,
    CommandSchema,
    Entity,
    Option,
    OptionKind,
    OptionNode,
    Snowflake,
    walk,
)
from slashmatch.faults import (
    MatchError,
    SchemaViolationError,
    IncompleteInteractionError,
    AmbiguousInteractionError,
    UnknownOptionError,
    TypeMismatchError,
    OutOfRangeError,
    MissingArgumentError,
    WrongTypeError,
)


SCHEMA = CommandSchema({
    "ping": [],
    "event create": [
        Option("title", OptionKind.STRING, required=True),
        Option("attendees", OptionKind.INTEGER, required=True, min_value=1),
        Option("public", OptionKind.BOOLEAN),
        Option("budget", OptionKind.NUMBER),
        Option("host", OptionKind.USER),
        Option("audience", OptionKind.MENTIONABLE),
        Option("venue", OptionKind.CHANNEL),
    ],
    "event delete": [Option("id", OptionKind.INTEGER, required=True)],
    "tally": [Option("count", OptionKind.INTEGER)],
    "admin event create": [Option("title", OptionKind.STRING)],
    "admin event delete": [],
})


def leaf(name, type, value):
    return {"name": name, "type": type, "value": value}


def sub(name, *options, type=1):
    return {"name": name, "type": type, "options": list(options)}


def group(name, *options):
    return sub(name, *options, type=2)


def interaction(name, *options, resolved=None):
    data = {"name": name, "options": list(options)}
    if resolved is not None:
        data["resolved"] = resolved
    return data


def run(data, schema=SCHEMA):
    return walk(OptionNode.from_payload(data), schema, resolved=data.get("resolved"))


class TestWalk(TestCase):
    """Behavioral tests for walk() on well-formed trees."""

    def testScenarioLaunch(self):
        path, match = run(interaction("event", sub("create", leaf("title", 3, "Launch"), leaf("attendees", 4, 5))))
        self.assertEqual(path, ("event", "create"))
        self.assertEqual(match.required("title", str), "Launch")
        self.assertEqual(match.required("attendees", int), 5)

    def testScenarioMissingAttendees(self):
        path, match = run(interaction("event", sub("create", leaf("title", 3, "Launch"))))
        self.assertEqual(match.required("title", str), "Launch")
        with self.assertRaises(MissingArgumentError) as context:
            match.required("attendees", int)
        self.assertEqual(context.exception.options["path"], ("event", "create"))

    def testScenarioStringForInteger(self):
        with self.assertRaises(TypeMismatchError) as context:
            run(interaction("tally", leaf("count", 3, "5")))
        fault = context.exception
        self.assertEqual(fault.options["path"], ("tally",))
        self.assertEqual(fault.options["name"], "count")

    def testScenarioTwoSubcommands(self):
        with self.assertRaises(AmbiguousInteractionError) as context:
            run(interaction("event", sub("create"), sub("delete", leaf("id", 4, 1))))
        self.assertEqual(context.exception.options["path"], ("event",))

    def testDepthOne(self):
        path, match = run(interaction("ping"))
        self.assertEqual(path, ("ping",))
        self.assertEqual(len(path), 1)
        self.assertEqual(len(match), 0)

    def testDepthTwo(self):
        path, match = run(interaction("event", sub("delete", leaf("id", 4, 7))))
        self.assertEqual(len(path), 2)
        self.assertEqual(match.required("id", int), 7)

    def testDepthThree(self):
        path, match = run(interaction("admin", group("event", sub("create", leaf("title", 3, "Launch")))))
        self.assertIsInstance(path, CommandPath)
        self.assertEqual(path, ("admin", "event", "create"))
        self.assertEqual(match.path, path)
        self.assertEqual(match.required("title", str), "Launch")

    def testSubcommandWithoutOptions(self):
        path, match = run(interaction("admin", group("event", sub("delete"))))
        self.assertEqual(str(path), "admin event delete")
        self.assertFalse(match)

    def testAbsentOptionalOptionsAreAbsent(self):
        _, match = run(interaction("event", sub("create", leaf("title", 3, "Launch"), leaf("attendees", 4, 5))))
        self.assertFalse(match.has("public"))
        self.assertNotIn("public", match)
        self.assertIsNone(match.optional("public", bool))
        self.assertTrue(match.optional("public", bool, True))

    def testSchemaKindWinsOverWireKind(self):
        _, match = run(interaction("tally", leaf("count", 10, 5)))
        self.assertIs(type(match.required("count", int)), int)

    def testDeclaredBoundsApply(self):
        with self.assertRaises(OutOfRangeError) as context:
            run(interaction("event", sub("create", leaf("title", 3, "Launch"), leaf("attendees", 4, 0))))
        self.assertEqual(context.exception.options["path"], ("event", "create"))
        self.assertEqual(context.exception.options["name"], "attendees")

    def testResolvedMapIsOptional(self):
        _, match = run(interaction("event", sub("create", leaf("host", 6, "42"))))
        entity = match.entity("host")
        self.assertEqual(entity, Entity(OptionKind.USER, Snowflake(42, OptionKind.USER), None, None))


class TestWalkFaults(TestCase):
    """Behavioral tests for walk() on malformed or unmatched trees."""

    def testEmptyGroupIsIncomplete(self):
        with self.assertRaises(IncompleteInteractionError) as context:
            run(interaction("admin", group("event")))
        self.assertEqual(context.exception.options["path"], ("admin", "event"))

    def testSchemaPrefixIsIncomplete(self):
        with self.assertRaises(IncompleteInteractionError) as context:
            run(interaction("event"))
        self.assertIn("event create", context.exception.hint)

    def testUndeclaredPathIsViolation(self):
        with self.assertRaises(SchemaViolationError):
            run(interaction("unknown"))
        with self.assertRaises(SchemaViolationError):
            run(interaction("event", sub("update")))

    def testTwoGroupsAreAmbiguous(self):
        with self.assertRaises(AmbiguousInteractionError):
            run(interaction("admin", group("event", sub("create")), group("user", sub("ban"))))

    def testTwoSubcommandsInGroupAreAmbiguous(self):
        with self.assertRaises(AmbiguousInteractionError) as context:
            run(interaction("admin", group("event", sub("create"), sub("delete"))))
        self.assertEqual(context.exception.options["path"], ("admin", "event"))

    def testMixedChildrenAreViolation(self):
        with self.assertRaises(SchemaViolationError):
            run(interaction("event", sub("create"), leaf("title", 3, "Launch")))

    def testGroupWithLeavesIsViolation(self):
        with self.assertRaises(SchemaViolationError):
            run(interaction("admin", group("event", leaf("title", 3, "Launch"))))

    def testMisplacedNestingIsViolation(self):
        for data in (
            interaction("admin", sub("event", sub("create"))),
            interaction("admin", group("event", group("create", sub("x")))),
            interaction("admin", {"name": "x", "type": 0}),
        ):
            with self.subTest(data=data), self.assertRaises(SchemaViolationError):
                run(data)

    def testFourthLevelIsViolation(self):
        with self.assertRaises(SchemaViolationError) as context:
            run(interaction("admin", group("event", sub("create", sub("now")))))
        self.assertEqual(context.exception.options["path"], ("admin", "event", "create"))

    def testUnknownOption(self):
        with self.assertRaises(UnknownOptionError) as context:
            run(interaction("event", sub("create", leaf("titel", 3, "Launch"))))
        fault = context.exception
        self.assertEqual(fault.options["name"], "titel")
        self.assertEqual(fault.options["path"], ("event", "create"))
        self.assertEqual(fault.options["suggestions"][0], "title")

    def testUnknownOptionRegardlessOfValue(self):
        for value in ("x", 5, True, None):
            with self.subTest(value=value), self.assertRaises(UnknownOptionError):
                run(interaction("tally", leaf("total", 4, value)))

    def testDuplicateOptionIsViolation(self):
        with self.assertRaises(SchemaViolationError):
            run(interaction("tally", leaf("count", 4, 1), leaf("count", 4, 2)))

    def testRootMustBeCommand(self):
        with self.assertRaises(SchemaViolationError):
            walk(OptionNode("create", OptionKind.SUBCOMMAND), SCHEMA)
        with self.assertRaises(TypeError):
            walk(interaction("ping"), SCHEMA)

    def testFaultsAreMatchErrors(self):
        for data in (interaction("admin", group("event")), interaction("tally", leaf("count", 3, "5"))):
            with self.subTest(data=data), self.assertRaises(MatchError):
                run(data)


class TestArgumentMatch(TestCase):
    """Behavioral tests for ArgumentMatch accessors."""

    def setUp(self) -> None:
        self.match = ArgumentMatch(
            {
                "title": "Launch",
                "attendees": 5,
                "public": True,
                "budget": 12.5,
                "host": Snowflake(1, OptionKind.USER),
                "audience": Snowflake(2, OptionKind.MENTIONABLE),
                "venue": Snowflake(3, OptionKind.CHANNEL),
            },
            "event create",
            {
                "users": {"1": {"id": "1", "username": "eiko"}},
                "members": {"1": {"nick": "Eiko"}},
                "roles": {"2": {"id": "2", "name": "crew"}},
            },
        )

    def testMappingProtocol(self):
        self.assertEqual(list(self.match), ["title", "attendees", "public", "budget", "host", "audience", "venue"])
        self.assertEqual(len(self.match), 7)
        self.assertEqual(self.match["title"], "Launch")
        self.assertTrue(self.match.has("title"))
        self.assertFalse(self.match.has("missing"))

    def testImmutable(self):
        with self.assertRaises(TypeError):
            self.match["title"] = "Other"  # type: ignore[index]

    def testPath(self):
        self.assertEqual(self.match.path, ("event", "create"))
        self.assertIsNone(ArgumentMatch({"a": 1}).path)

    def testStrictVariants(self):
        with self.assertRaises(WrongTypeError):
            self.match.required("attendees", float)
        with self.assertRaises(WrongTypeError):
            self.match.required("public", int)
        with self.assertRaises(WrongTypeError):
            self.match.required("host", int)
        with self.assertRaises(WrongTypeError):
            self.match.required("budget", int)
        self.assertIs(self.match.required("public", bool), True)
        self.assertEqual(self.match.required("budget", float), 12.5)

    def testWrongTypeContext(self):
        with self.assertRaises(WrongTypeError) as context:
            self.match.required("attendees", float)
        fault = context.exception
        self.assertEqual(str(fault), "option 'attendees' was decoded as integer, not number")
        self.assertIs(fault.options["expected"], float)
        self.assertIs(fault.options["found"], int)

    def testKindExpectations(self):
        self.assertEqual(self.match.required("attendees", OptionKind.INTEGER), 5)
        self.assertEqual(self.match.required("host", OptionKind.USER), Snowflake(1, OptionKind.USER))
        with self.assertRaises(WrongTypeError):
            self.match.required("host", OptionKind.ROLE)
        with self.assertRaises(TypeError):
            self.match.required("host", OptionKind.SUBCOMMAND)

    def testUnsupportedExpectation(self):
        with self.assertRaises(TypeError):
            self.match.required("title", list)

    def testMissingNeverWrongType(self):
        for expected in (str, int, float, bool, Snowflake):
            with self.subTest(expected=expected), self.assertRaises(MissingArgumentError):
                self.match.required("missing", expected)

    def testOptional(self):
        self.assertEqual(self.match.optional("title", str), "Launch")
        self.assertIsNone(self.match.optional("missing", str))
        self.assertEqual(self.match.optional("missing", str, "fallback"), "fallback")
        with self.assertRaises(WrongTypeError):
            self.match.optional("title", int, "fallback")

    def testEntityUser(self):
        entity = self.match.entity("host")
        self.assertIs(entity.kind, OptionKind.USER)
        self.assertEqual(entity.id, Snowflake(1, OptionKind.USER))
        self.assertEqual(entity.data["username"], "eiko")
        self.assertEqual(entity.member["nick"], "Eiko")
        self.assertIsInstance(entity.data, MappingProxyType)

    def testEntityMentionableResolvesRole(self):
        entity = self.match.entity("audience")
        self.assertIs(entity.kind, OptionKind.ROLE)
        self.assertEqual(entity.data["name"], "crew")
        self.assertIsNone(entity.member)

    def testEntityWithoutResolvedData(self):
        entity = self.match.entity("venue")
        self.assertIs(entity.kind, OptionKind.CHANNEL)
        self.assertIsNone(entity.data)

    def testEntityWithNullResolvedMaps(self):
        match = ArgumentMatch(
            {"host": Snowflake(1, OptionKind.USER), "audience": Snowflake(2, OptionKind.MENTIONABLE)},
            resolved={"users": None, "members": None, "roles": None},
        )
        self.assertEqual(match.entity("host"), Entity(OptionKind.USER, Snowflake(1, OptionKind.USER), None, None))
        self.assertIsNone(match.entity("audience").data)

    def testEntityRequiresSnowflake(self):
        with self.assertRaises(WrongTypeError):
            self.match.entity("title")
        with self.assertRaises(MissingArgumentError):
            self.match.entity("missing")

    def testEarlyExitChain(self):
        def handler(match):
            title = match.required("title", str)
            guests = match.required("guests", int)
            return title, guests

        with self.assertRaises(MissingArgumentError) as context:
            handler(self.match)
        self.assertEqual(context.exception.options["name"], "guests")

    def testRepr(self):
        self.assertEqual(repr(ArgumentMatch({"title": "Launch"})), "argument-match(title='Launch')")


class TestCommandPath(TestCase):
    """Behavioral tests for CommandPath."""

    def testParseAndStr(self):
        path = CommandPath.parse("admin event create")
        self.assertEqual(path, ("admin", "event", "create"))
        self.assertEqual(str(path), "admin event create")
        self.assertEqual(repr(path), "command-path('admin event create')")

    def testCommandAndParent(self):
        path = CommandPath(("event", "create"))
        self.assertEqual(path.command, "event")
        self.assertEqual(path.parent, ("event",))
        self.assertIsNone(path.parent.parent)

    def testStartswith(self):
        path = CommandPath(("admin", "event", "create"))
        self.assertTrue(path.startswith(("admin", "event")))
        self.assertFalse(path.startswith(("event",)))

    def testHashesLikeTuple(self):
        self.assertEqual({CommandPath(("event", "create")): 1}[("event", "create")], 1)

    def testCoerce(self):
        path = CommandPath(("event",))
        self.assertIs(CommandPath.coerce(path), path)
        self.assertEqual(CommandPath.coerce("event create"), ("event", "create"))
        self.assertEqual(CommandPath.coerce(["event"]), ("event",))

    def testValidation(self):
        with self.assertRaises(ValueError):
            CommandPath(())
        with self.assertRaises(ValueError):
            CommandPath(("a", "b", "c", "d"))
        with self.assertRaises(ValueError):
            CommandPath(("event create",))
        with self.assertRaises(ValueError):
            CommandPath(("",))
        with self.assertRaises(TypeError):
            CommandPath((1,))
        with self.assertRaises(TypeError):
            CommandPath("event")
        with self.assertRaises(TypeError):
            CommandPath.parse(("event",))


if __name__ == '__main__':
    unittest.main()
