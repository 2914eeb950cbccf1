"""Tests for genai Schema -> JSON-schema conversion."""

from google.genai import types

from claude_adk.interface.schema import schema_to_dict


class TestSchemaToDict:
    def test_nested_types_lowercased(self) -> None:
        schema = types.Schema(
            type=types.Type.OBJECT,
            properties={
                "name": types.Schema(type=types.Type.STRING),
                "tags": types.Schema(
                    type=types.Type.ARRAY, items=types.Schema(type=types.Type.STRING)
                ),
            },
            required=["name"],
        )
        got = schema_to_dict(schema)

        assert got["type"] == "object"
        assert got["properties"]["name"] == {"type": "string"}
        assert got["properties"]["tags"]["type"] == "array"
        assert got["properties"]["tags"]["items"] == {"type": "string"}
        assert got["required"] == ["name"]

    def test_description_and_enum(self) -> None:
        schema = types.Schema(
            type=types.Type.STRING,
            description="Swell direction",
            enum=["N", "S"],
        )
        assert schema_to_dict(schema) == {
            "type": "string",
            "description": "Swell direction",
            "enum": ["N", "S"],
        }

    def test_string_type_name(self) -> None:
        schema = types.Schema(type="INTEGER")
        assert schema_to_dict(schema) == {"type": "integer"}

    def test_none_is_empty_object(self) -> None:
        assert schema_to_dict(None) == {"type": "object"}

    def test_untyped_schema_omits_type(self) -> None:
        assert schema_to_dict(types.Schema(description="anything")) == {
            "description": "anything"
        }
