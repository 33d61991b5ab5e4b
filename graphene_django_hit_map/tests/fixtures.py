"""graphql-core schemas shared by the instrumentation tests."""

from graphql import build_schema

SDL = """
  scalar Date

  enum Status {
    PENDING
  }

  directive @fooDirective(
    requires: Status = PENDING,
  ) on OBJECT | FIELD_DEFINITION

  type TypeObject {
    plainField: String
    scalarField: Date
    objectField: ObjectTypeField
    enumField: Status
  }

  type ObjectTypeField {
    intField: Int
    zeroField: Int
  }

  input TypeInput {
    inputField: String
    inputObjectField: InputObjectField
  }

  input InputObjectField {
    inputIntField: Int
  }

  type Query {
    testPlain(msg: String!): String
    testObject: TypeObject
  }

  type Mutation {
    testInput(input: TypeInput!): String
    neverCalled: String
  }

  type Subscription {
    ticks: ObjectTypeField
  }
"""


def _test_plain(root, info, msg):
    return "testPlain"


def _test_object(root, info):
    return {"plainField": "testObject", "enumField": "PENDING", "objectField": {"intField": 99}}


def _scalar_field(root, info):
    return "2022-10-02"


def _object_field(root, info):
    return {"intField": 66}


def _int_field(root, info):
    return root["intField"]


def _test_input(root, info, input):  # pylint: disable=redefined-builtin
    return input["inputField"]


def _never_called(root, info):
    return "neverCalled"


async def _subscribe_ticks(root, info):
    for value in (1, 2):
        yield {"ticks": {"intField": value}}


# TypeObject.plainField, TypeObject.enumField and ObjectTypeField.zeroField use the default resolver.
RESOLVERS = {
    "Query": {"testPlain": _test_plain, "testObject": _test_object},
    "TypeObject": {"scalarField": _scalar_field, "objectField": _object_field},
    "ObjectTypeField": {"intField": _int_field},
    "Mutation": {"testInput": _test_input, "neverCalled": _never_called},
}


def build_test_schema():
    """Build a fresh schema with the resolvers above attached."""
    schema = build_schema(SDL)
    for type_name, resolvers in RESOLVERS.items():
        fields = schema.type_map[type_name].fields
        for field_name, resolver in resolvers.items():
            fields[field_name].resolve = resolver
    schema.subscription_type.fields["ticks"].subscribe = _subscribe_ticks
    return schema
